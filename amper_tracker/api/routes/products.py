"""Product routes: catalogue listing and per-product reading views."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from amper_tracker.api.dependencies import PageParams, TimeRangeParams, path_product, path_username
from amper_tracker.core.database import get_db
from amper_tracker.core.errors import ValidationError, ValidationReason
from amper_tracker.core.logging import EventLog, get_event_log
from amper_tracker.models.product import Product
from amper_tracker.schemas.common import ApiResponse, request_meta
from amper_tracker.schemas.product import (
    ProductResponse,
    ProductSummary,
    ProductUserReadings,
    ProductUsers,
    ProductUsersPage,
    ProductUserStatistics,
)
from amper_tracker.schemas.reading import ReadingResponse
from amper_tracker.services import products as product_service
from amper_tracker.services.validation import ensure_sensor, normalize_sensor_name

router = APIRouter(prefix="/products", tags=["products"])


def _summary(product: Product) -> ProductSummary:
    return ProductSummary(id=product.id, name=product.name, sensors=list(product.sensors))


def _resolve_sensor(product: Product, raw: str | None) -> str | None:
    """Decode and check an optional ``sensor`` query value against ``product``."""
    if raw is None:
        return None
    sensor = normalize_sensor_name(raw, product.sensors)
    if not sensor:
        return None
    return ensure_sensor(product, sensor)


@router.get("", response_model=ApiResponse[list[ProductResponse]])
def list_products(db: Session = Depends(get_db)) -> ApiResponse[list[ProductResponse]]:
    """All products, each with the readings that reference it."""
    products = product_service.list_products(db)
    data = [
        ProductResponse(
            id=product.id,
            name=product.name,
            sensors=list(product.sensors),
            created_at=product.created_at,
            updated_at=product.updated_at,
            readings=[ReadingResponse.from_reading(r) for r in product.readings],
        )
        for product in products
    ]
    return ApiResponse[list[ProductResponse]](data=data, meta=request_meta(count=len(data)))


@router.get("/{productId}/users", response_model=ApiResponse[ProductUsers])
def get_product_users(
    product: Product = Depends(path_product),
    window: TimeRangeParams = Depends(),
    db: Session = Depends(get_db),
) -> ApiResponse[ProductUsers]:
    """Readings of a product grouped by username."""
    users = product_service.get_product_users(db, product, since=window.since)
    return ApiResponse[ProductUsers](
        data=ProductUsers(product=_summary(product), users=users),
        meta=request_meta(productId=product.id, totalUsers=len(users), **window.meta()),
    )


@router.get("/{productId}/sensor", response_model=ApiResponse[ProductUsersPage])
def get_users_by_sensor(
    product: Product = Depends(path_product),
    sensor: str | None = Query(None, description="Sensor channel name"),
    paging: PageParams = Depends(),
    window: TimeRangeParams = Depends(),
    db: Session = Depends(get_db),
    events: EventLog = Depends(get_event_log),
) -> ApiResponse[ProductUsersPage]:
    """Users who reported on one sensor of a product, paginated."""
    resolved = _resolve_sensor(product, sensor)
    if resolved is None:
        raise ValidationError(ValidationReason.MISSING_FIELD, "Sensor parameter is required")

    users, pagination = product_service.get_product_users_page(
        db, product, resolved, page=paging.page, limit=paging.limit, since=window.since
    )
    events.emit("products.sensor_users", product_id=product.id, sensor=resolved, count=len(users))
    return ApiResponse[ProductUsersPage](
        data=ProductUsersPage(
            product=_summary(product), sensor=resolved, users=users, pagination=pagination
        ),
        meta=request_meta(
            productId=product.id, sensor=resolved, totalUsers=pagination.total, **window.meta()
        ),
    )


@router.get("/{productId}/users/{username}", response_model=ApiResponse[ProductUserReadings])
def get_user_readings_in_product(
    product: Product = Depends(path_product),
    username: str = Depends(path_username),
    paging: PageParams = Depends(),
    window: TimeRangeParams = Depends(),
    db: Session = Depends(get_db),
) -> ApiResponse[ProductUserReadings]:
    """A user's readings for one product, paginated newest first."""
    readings, pagination = product_service.get_user_product_readings(
        db, product, username, page=paging.page, limit=paging.limit, since=window.since
    )
    return ApiResponse[ProductUserReadings](
        data=ProductUserReadings(
            product=_summary(product),
            username=username,
            readings=[ReadingResponse.from_reading(r) for r in readings],
            pagination=pagination,
        ),
        meta=request_meta(productId=product.id, username=username, **window.meta()),
    )


@router.get(
    "/{productId}/users/{username}/readings",
    response_model=ApiResponse[ProductUserReadings],
)
def get_user_sensor_readings(
    product: Product = Depends(path_product),
    username: str = Depends(path_username),
    sensor: str | None = Query(None, description="Sensor channel name"),
    paging: PageParams = Depends(),
    window: TimeRangeParams = Depends(),
    db: Session = Depends(get_db),
) -> ApiResponse[ProductUserReadings]:
    """A user's readings for one product, optionally narrowed to one sensor."""
    resolved = _resolve_sensor(product, sensor)
    readings, pagination = product_service.get_user_product_readings(
        db,
        product,
        username,
        page=paging.page,
        limit=paging.limit,
        sensor=resolved,
        since=window.since,
    )
    return ApiResponse[ProductUserReadings](
        data=ProductUserReadings(
            product=_summary(product),
            username=username,
            sensor=resolved,
            readings=[ReadingResponse.from_reading(r) for r in readings],
            pagination=pagination,
        ),
        meta=request_meta(
            productId=product.id, username=username, sensor=resolved, **window.meta()
        ),
    )


@router.get(
    "/{productId}/users/{username}/readings/stats",
    response_model=ApiResponse[ProductUserStatistics],
)
def get_user_reading_statistics(
    product: Product = Depends(path_product),
    username: str = Depends(path_username),
    sensor: str | None = Query(None, description="Sensor channel name"),
    window: TimeRangeParams = Depends(),
    db: Session = Depends(get_db),
) -> ApiResponse[ProductUserStatistics]:
    """Min/max/average and band counts for a user's readings in a product."""
    resolved = _resolve_sensor(product, sensor)
    statistics = product_service.get_user_product_statistics(
        db, product, username, sensor=resolved, since=window.since
    )
    return ApiResponse[ProductUserStatistics](
        data=ProductUserStatistics(
            product=_summary(product),
            username=username,
            sensor=resolved,
            statistics=statistics,
        ),
        meta=request_meta(
            productId=product.id, username=username, sensor=resolved, **window.meta()
        ),
    )
