"""
Filter Predicate Builder
========================

Turns the optional listing parameters (free-text search, severity list,
status list, service substring) into one explicit predicate tree, then
compiles that tree into a SQLAlchemy boolean expression.

Predicate variants:
    Contains(field, text)  -- substring match on one column
    InSet(field, values)   -- column equals any of the values
    Or(children)           -- any child matches
    And(children)          -- every child matches; And(()) matches everything

Semantics:
    AND across condition groups, OR within a list and across the search
    columns. Absent parameters impose no restriction.

Usage:
    predicate = build_filter_predicate(search="latency", severity="SEV1,SEV2")
    stmt = select(Incident).where(compile_predicate(predicate))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy import ColumnElement, and_, or_, true

from app.models.incident import Incident

# Columns the free-text search looks in
SEARCH_FIELDS: tuple[str, ...] = ("title", "service", "owner", "summary")

FILTERABLE_COLUMNS = {
    "title": Incident.title,
    "service": Incident.service,
    "severity": Incident.severity,
    "status": Incident.status,
    "owner": Incident.owner,
    "summary": Incident.summary,
}


@dataclass(frozen=True)
class Contains:
    field: str
    text: str


@dataclass(frozen=True)
class InSet:
    field: str
    values: tuple[str, ...]


@dataclass(frozen=True)
class Or:
    children: tuple["Predicate", ...]


@dataclass(frozen=True)
class And:
    children: tuple["Predicate", ...]


Predicate = Union[Contains, InSet, Or, And]

MATCH_ALL = And(())


def split_csv(raw: Optional[str]) -> list[str]:
    """
    Split a comma-separated parameter and trim each element.

    Empty elements are kept (as "") so callers can reject them; an absent
    or blank parameter yields an empty list.
    """
    if raw is None or not raw.strip():
        return []
    return [token.strip() for token in raw.split(",")]


def _normalize_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def build_filter_predicate(
    search: Optional[str] = None,
    severity: Optional[str] = None,
    status: Optional[str] = None,
    service: Optional[str] = None,
) -> And:
    """
    Build the predicate for an incident listing.

    Unknown severity or status tokens are kept as literal equality
    conditions; validating enum membership is the caller's job.

    Args:
        search: Substring looked up in title, service, owner and summary
        severity: Comma-separated severity labels
        status: Comma-separated status labels
        service: Substring of the service name

    Returns:
        An And predicate; MATCH_ALL when nothing is supplied
    """
    conditions: list[Predicate] = []

    search = _normalize_text(search)
    if search:
        conditions.append(Or(tuple(Contains(field, search) for field in SEARCH_FIELDS)))

    severities = split_csv(severity)
    if severities:
        conditions.append(InSet("severity", tuple(severities)))

    statuses = split_csv(status)
    if statuses:
        conditions.append(InSet("status", tuple(statuses)))

    service = _normalize_text(service)
    if service:
        conditions.append(Contains("service", service))

    if not conditions:
        return MATCH_ALL
    return And(tuple(conditions))


def compile_predicate(predicate: Predicate) -> ColumnElement[bool]:
    """
    Compile a predicate tree into a SQLAlchemy WHERE expression.

    Substring matches escape LIKE wildcards, so "%" and "_" in user text
    match literally. Case sensitivity follows the database collation.
    """
    if isinstance(predicate, Contains):
        return FILTERABLE_COLUMNS[predicate.field].contains(predicate.text, autoescape=True)
    if isinstance(predicate, InSet):
        return FILTERABLE_COLUMNS[predicate.field].in_(predicate.values)
    if isinstance(predicate, Or):
        return or_(*(compile_predicate(child) for child in predicate.children))
    if isinstance(predicate, And):
        if not predicate.children:
            return true()
        return and_(*(compile_predicate(child) for child in predicate.children))
    raise TypeError(f"Unsupported predicate: {predicate!r}")
