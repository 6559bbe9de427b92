"""Product catalogue and per-product reading queries."""

from datetime import datetime

from sqlalchemy.orm import Query, Session, selectinload

from amper_tracker.core.errors import NotFoundError, ValidationError, ValidationReason
from amper_tracker.models.product import Product
from amper_tracker.models.reading import AmperReading
from amper_tracker.schemas.common import Pagination
from amper_tracker.schemas.stats import FilteredStatistics, UserSummary
from amper_tracker.services.aggregation import filtered_statistics, group_by_username
from amper_tracker.services.readings import paginate, stream
from amper_tracker.services.validation import is_object_id

PRODUCT_NAME_MAX_LENGTH = 100


def create_product(db: Session, name: str, sensors: list[str] | None = None) -> Product:
    """Create a product; sensor names are trimmed and de-duplicated in order."""
    clean_name = name.strip() if isinstance(name, str) else ""
    if not clean_name or len(clean_name) > PRODUCT_NAME_MAX_LENGTH:
        raise ValidationError(
            ValidationReason.INVALID_PRODUCT_NAME,
            f"Product name must be 1 to {PRODUCT_NAME_MAX_LENGTH} characters",
        )

    unique_sensors: list[str] = []
    for sensor in sensors or []:
        candidate = sensor.strip()
        if candidate and candidate not in unique_sensors:
            unique_sensors.append(candidate)

    db_product = Product(name=clean_name, sensors=unique_sensors)
    db.add(db_product)
    db.commit()
    db.refresh(db_product)
    return db_product


def list_products(db: Session) -> list[Product]:
    """All products, newest first, with their readings loaded."""
    return (
        db.query(Product)
        .options(selectinload(Product.readings))
        .order_by(Product.created_at.desc())
        .all()
    )


def get_product_or_404(db: Session, product_id: str) -> Product:
    """Look up a product; malformed ids are reported as not found."""
    product = db.get(Product, product_id) if is_object_id(product_id) else None
    if product is None:
        raise NotFoundError("Product not found")
    return product


def readings_query(
    db: Session,
    product: Product,
    username: str | None = None,
    sensor: str | None = None,
    since: datetime | None = None,
) -> Query:
    """Readings of ``product`` narrowed by the optional filters.

    ``since`` is an inclusive lower bound on ``created_at``.
    """
    query = db.query(AmperReading).filter(AmperReading.product_id == product.id)
    if username is not None:
        query = query.filter(AmperReading.username == username)
    if sensor is not None:
        query = query.filter(AmperReading.sensor == sensor)
    if since is not None:
        query = query.filter(AmperReading.created_at >= since)
    return query


def get_product_users(
    db: Session,
    product: Product,
    sensor: str | None = None,
    since: datetime | None = None,
) -> list[UserSummary]:
    """Per-username summaries, most recently active user first."""
    query = readings_query(db, product, sensor=sensor, since=since).order_by(
        AmperReading.created_at.desc()
    )
    return group_by_username(stream(query))


def get_product_users_page(
    db: Session,
    product: Product,
    sensor: str,
    page: int = 1,
    limit: int = 50,
    since: datetime | None = None,
) -> tuple[list[UserSummary], Pagination]:
    """One page of the users who reported on ``sensor``."""
    users = get_product_users(db, product, sensor=sensor, since=since)
    skip = Pagination.skip(page, limit)
    return users[skip : skip + limit], Pagination.build(page, limit, len(users))


def get_user_product_readings(
    db: Session,
    product: Product,
    username: str,
    page: int = 1,
    limit: int = 50,
    sensor: str | None = None,
    since: datetime | None = None,
) -> tuple[list[AmperReading], Pagination]:
    query = readings_query(db, product, username=username, sensor=sensor, since=since)
    return paginate(query, page, limit)


def get_user_product_statistics(
    db: Session,
    product: Product,
    username: str,
    sensor: str | None = None,
    since: datetime | None = None,
) -> FilteredStatistics:
    query = readings_query(db, product, username=username, sensor=sensor, since=since)
    return filtered_statistics(stream(query))
