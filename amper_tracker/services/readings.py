"""Reading ingest and per-user queries."""

from datetime import datetime, timedelta, timezone

from fastapi import status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from amper_tracker.core.errors import NotFoundError, StoreError
from amper_tracker.core.logging import EventLog
from amper_tracker.models.product import Product
from amper_tracker.models.reading import AmperReading
from amper_tracker.schemas.common import Pagination
from amper_tracker.schemas.reading import ReadingCreate, RecentReading
from amper_tracker.schemas.stats import UserStats
from amper_tracker.services.aggregation import round_half_up, user_stats
from amper_tracker.services.validation import ensure_sensor

RECENT_WINDOW = timedelta(hours=24)

# Rows fetched per round trip when streaming readings into an aggregation.
STREAM_BATCH_SIZE = 500


def stream(query: Query):
    """Iterate a reading query in batches instead of loading it whole."""
    return query.yield_per(STREAM_BATCH_SIZE)


def create_reading(db: Session, reading_data: ReadingCreate, events: EventLog) -> AmperReading:
    """Store one reading after checking its product and sensor.

    Unknown products fail with a 400, since the id came from the client body.
    """
    product = db.get(Product, reading_data.product_id)
    if product is None:
        raise NotFoundError("Product not found", status_code=status.HTTP_400_BAD_REQUEST)
    if reading_data.sensor is not None:
        ensure_sensor(product, reading_data.sensor)

    db_reading = AmperReading(
        username=reading_data.username,
        amper=reading_data.amper,
        product_id=product.id,
        sensor=reading_data.sensor,
    )
    db.add(db_reading)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        events.failure("reading.insert_failed", exc, username=reading_data.username)
        raise StoreError() from exc
    db.refresh(db_reading)

    events.emit(
        "reading.created",
        username=db_reading.username,
        product_id=product.id,
        sensor=db_reading.sensor,
    )
    return db_reading


def get_user_stats(db: Session, username: str) -> UserStats:
    """High/low amperage statistics over every reading of ``username``."""
    query = db.query(AmperReading).filter(AmperReading.username == username)
    return user_stats(stream(query))


def get_recent_readings(
    db: Session,
    username: str,
    limit: int = 100,
    now: datetime | None = None,
) -> list[RecentReading]:
    """Newest-first readings from the last 24 hours, amper rounded to 2 places."""
    since = (now or datetime.now(timezone.utc)) - RECENT_WINDOW
    readings = (
        db.query(AmperReading)
        .filter(
            AmperReading.username == username,
            AmperReading.created_at >= since,
        )
        .order_by(AmperReading.created_at.desc())
        .limit(limit)
        .all()
    )
    return [
        RecentReading(
            id=reading.id,
            timestamp=reading.created_at,
            amper=round_half_up(reading.amper, 2),
        )
        for reading in readings
    ]


def paginate(query: Query, page: int, limit: int) -> tuple[list[AmperReading], Pagination]:
    """Apply newest-first ordering and a 1-indexed page window to ``query``."""
    total = query.count()
    readings = (
        query.order_by(AmperReading.created_at.desc())
        .offset(Pagination.skip(page, limit))
        .limit(limit)
        .all()
    )
    return readings, Pagination.build(page, limit, total)


def get_user_readings_page(
    db: Session,
    username: str,
    page: int = 1,
    limit: int = 50,
) -> tuple[list[AmperReading], Pagination]:
    """All readings of ``username``, newest first, one page at a time."""
    query = db.query(AmperReading).filter(AmperReading.username == username)
    return paginate(query, page, limit)
