"""
Filter Predicate Builder Tests
==============================

Tests for:
- Predicate structure produced by build_filter_predicate
- split_csv tokenizing
- compile_predicate evaluated against the database
  (AND across groups, OR within lists and across search columns)
"""

import pytest
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.query import (
    MATCH_ALL,
    And,
    Contains,
    InSet,
    Or,
    build_filter_predicate,
    compile_predicate,
    split_csv,
)
from app.models.incident import Incident


pytestmark = pytest.mark.unit


def _titles(db: Session, predicate) -> set[str]:
    stmt = select(Incident.title).where(compile_predicate(predicate))
    return set(db.scalars(stmt).all())


class TestSplitCsv:

    def test_none_is_empty(self):
        assert split_csv(None) == []

    def test_blank_is_empty(self):
        assert split_csv("   ") == []

    def test_elements_are_trimmed(self):
        assert split_csv(" SEV1 , SEV2,SEV3 ") == ["SEV1", "SEV2", "SEV3"]

    def test_empty_elements_are_kept_for_the_caller(self):
        assert split_csv("SEV1,,SEV2") == ["SEV1", "", "SEV2"]


class TestBuildFilterPredicate:

    def test_no_parameters_is_match_all(self):
        assert build_filter_predicate() == MATCH_ALL

    def test_blank_search_is_absent(self):
        assert build_filter_predicate(search="   ") == MATCH_ALL

    def test_search_covers_four_columns(self):
        predicate = build_filter_predicate(search=" latency ")

        assert predicate == And((
            Or((
                Contains("title", "latency"),
                Contains("service", "latency"),
                Contains("owner", "latency"),
                Contains("summary", "latency"),
            )),
        ))

    def test_lists_become_in_set_conditions(self):
        predicate = build_filter_predicate(severity="SEV1, SEV2", status="OPEN")

        assert predicate == And((
            InSet("severity", ("SEV1", "SEV2")),
            InSet("status", ("OPEN",)),
        ))

    def test_service_is_substring(self):
        assert build_filter_predicate(service="db") == And((Contains("service", "db"),))

    def test_unknown_tokens_pass_through(self):
        predicate = build_filter_predicate(severity="SEV9")
        assert predicate == And((InSet("severity", ("SEV9",)),))


class TestCompilePredicate:

    def test_match_all_returns_everything(self, db_session: Session, make_incident):
        make_incident(title="a")
        make_incident(title="b")

        assert _titles(db_session, MATCH_ALL) == {"a", "b"}

    def test_search_matches_any_column(self, db_session: Session, make_incident):
        make_incident(title="disk full on host")
        make_incident(title="t2", service="disk-service")
        make_incident(title="t3", owner="diskmaster")
        make_incident(title="t4", summary="the disk is on fire")
        make_incident(title="unrelated")

        predicate = build_filter_predicate(search="disk")

        assert _titles(db_session, predicate) == {"disk full on host", "t2", "t3", "t4"}

    def test_search_ignores_null_columns(self, db_session: Session, make_incident):
        make_incident(title="x", owner=None, summary=None)

        assert _titles(db_session, build_filter_predicate(search="nothing")) == set()

    def test_severity_list_is_or(self, db_session: Session, make_incident):
        make_incident(title="s1", severity="SEV1")
        make_incident(title="s2", severity="SEV2")
        make_incident(title="s3", severity="SEV3")

        predicate = build_filter_predicate(severity="SEV1,SEV3")

        assert _titles(db_session, predicate) == {"s1", "s3"}

    def test_groups_are_and(self, db_session: Session, make_incident):
        make_incident(title="match", severity="SEV1", status="OPEN", service="api")
        make_incident(title="wrong-status", severity="SEV1", status="RESOLVED", service="api")
        make_incident(title="wrong-service", severity="SEV1", status="OPEN", service="db")
        make_incident(title="wrong-severity", severity="SEV4", status="OPEN", service="api")

        predicate = build_filter_predicate(severity="SEV1", status="OPEN,MITIGATED", service="ap")

        assert _titles(db_session, predicate) == {"match"}

    def test_unknown_token_matches_nothing(self, db_session: Session, make_incident):
        make_incident(severity="SEV1")

        assert _titles(db_session, build_filter_predicate(severity="SEV9")) == set()

    def test_like_wildcards_match_literally(self, db_session: Session, make_incident):
        make_incident(title="CPU at 100% on worker")
        make_incident(title="CPU at 90 on worker")
        make_incident(title="snake_case service name")
        make_incident(title="snakeXcase")

        assert _titles(db_session, build_filter_predicate(search="100%")) == {"CPU at 100% on worker"}
        assert _titles(db_session, build_filter_predicate(search="snake_")) == {"snake_case service name"}

    def test_unsupported_predicate_raises(self):
        with pytest.raises(TypeError):
            compile_predicate("severity = SEV1")
