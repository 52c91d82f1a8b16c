"""
Incident Model
==============

The sole entity of the tracker: an operational issue owned by a service.

Timestamps are set by the application, not the database, so that
`updated_at` is refreshed on every mutation regardless of which fields
changed.

Database Indexes:
- Primary key: id (UUID)
- Indexes: service, severity, status, (status, created_at)
"""

import uuid
from datetime import datetime, UTC
from typing import Optional

from sqlalchemy import DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.core.enums import IncidentStatus
from app.db.base import Base


def utcnow() -> datetime:
    return datetime.now(UTC)


class Incident(Base):
    """
    Incident record.

    Attributes:
        id: UUID primary key, immutable
        title: Short headline (<= 200 chars)
        service: Owning subsystem (<= 100 chars)
        severity: SEV1..SEV4
        status: OPEN, MITIGATED or RESOLVED
        owner: Assignee, or None when unassigned
        summary: Free-form notes (<= 2000 chars)
        created_at: Creation timestamp, immutable
        updated_at: Last mutation timestamp
    """

    __tablename__ = "incidents"
    __table_args__ = (
        Index("ix_incidents_status_created", "status", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    service: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    severity: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=IncidentStatus.OPEN.value,
        index=True,
    )
    owner: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # ==========================
    # Timestamps
    # ==========================
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Incident(id={self.id}, severity={self.severity}, status={self.status})>"
