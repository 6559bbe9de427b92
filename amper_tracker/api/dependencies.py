"""Shared request dependencies for API routes."""

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from amper_tracker.core.config import settings
from amper_tracker.core.database import get_db
from amper_tracker.models.product import Product
from amper_tracker.services.products import get_product_or_404
from amper_tracker.services.time_range import parse_time_range
from amper_tracker.services.validation import validate_username


def path_username(username: str) -> str:
    """Validated, trimmed ``{username}`` path segment."""
    return validate_username(username)


def path_product(productId: str, db: Session = Depends(get_db)) -> Product:  # noqa: N803
    """The product named by the ``{productId}`` path segment, or 404."""
    return get_product_or_404(db, productId)


class PageParams:
    """``page``/``limit`` query parameters."""

    def __init__(
        self,
        page: int = Query(1, ge=1, description="1-indexed page number"),
        limit: int = Query(
            settings.DEFAULT_PAGE_LIMIT,
            ge=1,
            le=settings.MAX_PAGE_LIMIT,
            description="Rows per page",
        ),
    ) -> None:
        self.page = page
        self.limit = limit


class TimeRangeParams:
    """``timeRange`` query parameter and the cutoff it resolves to."""

    def __init__(
        self,
        time_range: str | None = Query(
            None, alias="timeRange", description="Lookback window: 1h, 6h, 12h, 24h, 7d or 30d"
        ),
    ) -> None:
        self.token = time_range
        self.since = parse_time_range(time_range)

    def meta(self) -> dict[str, str | None]:
        return {
            "timeRange": self.token,
            "filteredFrom": self.since.isoformat() if self.since else None,
        }
