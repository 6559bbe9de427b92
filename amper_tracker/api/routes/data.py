"""Reading ingest route."""

from typing import Any

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from amper_tracker.core.database import get_db
from amper_tracker.core.logging import EventLog, get_event_log
from amper_tracker.schemas.common import ApiResponse
from amper_tracker.schemas.reading import ProductRef, ReadingCreated
from amper_tracker.services import readings as reading_service
from amper_tracker.services.validation import validate_reading_payload

router = APIRouter(tags=["readings"])


@router.post(
    "/data",
    response_model=ApiResponse[ReadingCreated],
    status_code=status.HTTP_201_CREATED,
)
def ingest_reading(
    payload: dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    events: EventLog = Depends(get_event_log),
) -> ApiResponse[ReadingCreated]:
    """Store one amperage sample sent by a device."""
    reading_data = validate_reading_payload(payload)
    reading = reading_service.create_reading(db, reading_data, events)
    return ApiResponse[ReadingCreated](
        message="Amper reading saved successfully",
        data=ReadingCreated(
            id=reading.id,
            username=reading.username,
            amper=reading.amper,
            product=ProductRef(id=reading.product.id, name=reading.product.name),
            sensor=reading.sensor,
            timestamp=reading.created_at,
        ),
    )
