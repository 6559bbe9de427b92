"""Per-user reading routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from amper_tracker.api.dependencies import PageParams, path_username
from amper_tracker.core.config import settings
from amper_tracker.core.database import get_db
from amper_tracker.core.logging import EventLog, get_event_log
from amper_tracker.schemas.common import ApiResponse, request_meta
from amper_tracker.schemas.reading import ReadingPage, ReadingResponse, RecentReading
from amper_tracker.schemas.stats import UserStats
from amper_tracker.services import readings as reading_service

router = APIRouter(prefix="/user/{username}", tags=["users"])


@router.get("/stats", response_model=ApiResponse[UserStats])
def get_user_stats(
    username: str = Depends(path_username),
    db: Session = Depends(get_db),
) -> ApiResponse[UserStats]:
    """High/low amperage split across all of a user's readings."""
    stats = reading_service.get_user_stats(db, username)
    return ApiResponse[UserStats](data=stats)


@router.get("/recent", response_model=ApiResponse[list[RecentReading]])
def get_recent_readings(
    username: str = Depends(path_username),
    db: Session = Depends(get_db),
    events: EventLog = Depends(get_event_log),
) -> ApiResponse[list[RecentReading]]:
    """Readings from the last 24 hours, newest first."""
    readings = reading_service.get_recent_readings(
        db, username, limit=settings.RECENT_READINGS_LIMIT
    )
    events.emit("readings.recent", username=username, count=len(readings))
    return ApiResponse[list[RecentReading]](
        data=readings,
        meta=request_meta(count=len(readings), timeRange="last_24_hours"),
    )


@router.get("/all", response_model=ApiResponse[ReadingPage])
def get_all_readings(
    username: str = Depends(path_username),
    paging: PageParams = Depends(),
    db: Session = Depends(get_db),
) -> ApiResponse[ReadingPage]:
    """Every reading of a user, paginated newest first."""
    readings, pagination = reading_service.get_user_readings_page(
        db, username, page=paging.page, limit=paging.limit
    )
    return ApiResponse[ReadingPage](
        data=ReadingPage(
            readings=[ReadingResponse.from_reading(r) for r in readings],
            pagination=pagination,
        ),
        meta=request_meta(username=username, count=len(readings)),
    )
