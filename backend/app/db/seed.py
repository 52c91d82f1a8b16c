"""
Database Seeding Script
=======================

Fills the incidents table with realistic sample data for local
development and demos. Existing incidents are deleted first.

Usage:
    python -m app.db.seed                 # 200 incidents
    python -m app.db.seed --count 50 --seed 42
"""

import argparse
import random
from datetime import datetime, timedelta, UTC
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.enums import IncidentStatus, Severity
from app.core.logging import configure_logging, get_logger
from app.db.base import Base
from app.db.session import create_db_engine, create_session_factory
from app.models.incident import Incident

logger = get_logger(__name__)

BATCH_SIZE = 50

SERVICES = [
    "api-gateway",
    "auth-service",
    "payment-service",
    "user-service",
    "notification-service",
    "search-service",
    "inventory-service",
    "order-service",
    "billing-service",
    "analytics-service",
    "cdn-edge",
    "database-primary",
    "cache-cluster",
    "message-queue",
    "load-balancer",
]

# None entries leave some incidents unassigned
OWNERS = [
    "karthik.m",
    "priya.nair",
    "arjun.reddy",
    "divya.s",
    "vijay.kumar",
    "meena.raj",
    "suresh.pillai",
    "ananya.k",
    "ravi.shankar",
    "lakshmi.v",
    None,
    None,
]

TITLE_PREFIXES = [
    "High latency detected in",
    "Service degradation on",
    "Connection timeout in",
    "Memory leak detected in",
    "CPU spike observed on",
    "Disk space critical on",
    "SSL cert expiring for",
    "DB connection pool exhausted in",
    "Rate limiting triggered on",
    "Health check failures on",
    "Deployment rollback needed for",
    "Data inconsistency found in",
    "Error rate spike in",
    "Queue backlog growing on",
    "DNS resolution failures for",
    "Network partition detected in",
    "Cascading failure from",
    "Unauth access attempt on",
    "Config drift detected in",
    "Resource quota exceeded on",
]

SUMMARIES = [
    "Dashboards showing elevated error rates since ~14:30 UTC. A few support tickets came in too. Looking into root cause now.",
    "p99 latency went past 5s and alerts fired. Started after the last deploy. Rolling back while we investigate.",
    "Health checks failing across multiple AZs. LB pulled the bad instances and the ASG is replacing them.",
    "Replication lag spiked and some users are seeing stale data. DBA team is checking slow queries.",
    "Memory usage above 90% on prod boxes. GC pauses are dropping requests. Scaling out as a stopgap.",
    "Third-party API flapping with 503s. Circuit breaker is on and the vendor has been contacted.",
    "Cache invalidation bug serving stale data. Hotfix in progress; cache flushed manually.",
    "Lots of 429s from the gateway. Limits look correct, so this may be bot traffic or a client retry storm.",
    "Spotted during on-call handoff. Not customer-facing yet but worth tracking.",
    "Not certain this is real. Grafana shows a blip that could be metrics pipeline delay.",
    None,
    None,
    None,
]


def _random_incident(rng: random.Random, now: datetime) -> Incident:
    service = rng.choice(SERVICES)
    created = now - timedelta(seconds=rng.uniform(0, 180 * 86400))
    updated = min(created + timedelta(seconds=rng.uniform(0, 7 * 86400)), now)

    return Incident(
        title=f"{rng.choice(TITLE_PREFIXES)} {service}",
        service=service,
        severity=rng.choice(list(Severity)).value,
        status=rng.choice(list(IncidentStatus)).value,
        owner=rng.choice(OWNERS),
        summary=rng.choice(SUMMARIES),
        created_at=created,
        updated_at=updated,
    )


def seed_incidents(
    db: Session,
    count: int = 200,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> int:
    """
    Replace all incidents with `count` random ones.

    Rows are inserted and committed in batches of BATCH_SIZE.

    Args:
        db: Database session
        count: Number of incidents to create
        rng: Random source, for reproducible data
        now: Reference time; no timestamp is later than this

    Returns:
        Number of incidents inserted
    """
    rng = rng or random.Random()
    now = now or datetime.now(UTC)

    db.execute(delete(Incident))
    db.commit()

    inserted = 0
    while inserted < count:
        batch = [_random_incident(rng, now) for _ in range(min(BATCH_SIZE, count - inserted))]
        db.add_all(batch)
        db.commit()
        inserted += len(batch)
        logger.info("seed_batch_inserted", inserted=inserted, total=count)

    return inserted


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Seed the incidents table with sample data")
    parser.add_argument("--count", type=int, default=200, help="Number of incidents (default: 200)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible data")
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings)

    engine = create_db_engine(settings)
    Base.metadata.create_all(bind=engine)
    session_factory = create_session_factory(engine)

    with session_factory() as db:
        inserted = seed_incidents(db, count=args.count, rng=random.Random(args.seed))

    logger.info("seed_complete", inserted=inserted, database=engine.url.render_as_string(hide_password=True))
    engine.dispose()


if __name__ == "__main__":
    main()
