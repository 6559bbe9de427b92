"""Input validation for reading writes and request parameters."""

import math
import re
from collections.abc import Collection, Mapping
from typing import Any
from urllib.parse import unquote_plus

from amper_tracker.core.errors import ValidationError, ValidationReason
from amper_tracker.models.product import Product
from amper_tracker.schemas.reading import ReadingCreate

USERNAME_MAX_LENGTH = 50
AMPER_MIN = 0.0
AMPER_MAX = 100.0

_OBJECT_ID_PATTERN = re.compile(r"[0-9a-fA-F]{24}")


def is_object_id(value: Any) -> bool:
    """Whether ``value`` looks like a store identifier (24 hex characters)."""
    return isinstance(value, str) and bool(_OBJECT_ID_PATTERN.fullmatch(value))


def validate_username(raw: Any) -> str:
    """Return the trimmed username or raise ``InvalidUsername``."""
    if not isinstance(raw, str) or not raw.strip():
        raise ValidationError(
            ValidationReason.INVALID_USERNAME, "Username must be a non-empty string"
        )
    username = raw.strip()
    if len(username) > USERNAME_MAX_LENGTH:
        raise ValidationError(
            ValidationReason.INVALID_USERNAME,
            f"Username cannot exceed {USERNAME_MAX_LENGTH} characters",
        )
    return username


def coerce_amper(raw: Any) -> float:
    """Coerce ``raw`` to a finite amperage within [0, 100]."""
    if isinstance(raw, bool):
        raise ValidationError(ValidationReason.INVALID_AMPER, "Amper value must be a valid number")
    try:
        value = float(raw.strip() if isinstance(raw, str) else raw)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(
            ValidationReason.INVALID_AMPER, "Amper value must be a valid number"
        ) from None
    if not math.isfinite(value):
        raise ValidationError(ValidationReason.INVALID_AMPER, "Amper value must be a valid number")
    if value < AMPER_MIN:
        raise ValidationError(ValidationReason.INVALID_AMPER, "Amper value cannot be negative")
    if value > AMPER_MAX:
        raise ValidationError(ValidationReason.INVALID_AMPER, "Amper value cannot exceed 100A")
    return value


def validate_product_id(raw: Any) -> str:
    """Return the trimmed product id or raise ``InvalidProductId``."""
    candidate = raw.strip() if isinstance(raw, str) else raw
    if not is_object_id(candidate):
        raise ValidationError(
            ValidationReason.INVALID_PRODUCT_ID,
            "Product ID must be a 24-character hexadecimal string",
        )
    return candidate


def validate_reading_payload(payload: Mapping[str, Any]) -> ReadingCreate:
    """Parse an ingest body into a ``ReadingCreate``.

    Presence of every required field is checked first, then each field's
    shape, so the reported reason names the first violated rule. The
    product's existence is not checked here.
    """
    missing = {
        "username": "Username is required",
        "amper": "Amper value is required",
        "productId": "Product ID is required",
    }
    for field, message in missing.items():
        if payload.get(field) is None:
            raise ValidationError(ValidationReason.MISSING_FIELD, message)

    sensor = payload.get("sensor")
    if sensor is not None:
        if not isinstance(sensor, str):
            raise ValidationError(ValidationReason.UNKNOWN_SENSOR, "Sensor must be a string")
        sensor = sensor.strip() or None

    return ReadingCreate(
        username=validate_username(payload["username"]),
        amper=coerce_amper(payload["amper"]),
        product_id=validate_product_id(payload["productId"]),
        sensor=sensor,
    )


def normalize_sensor_name(raw: str, declared: Collection[str] = ()) -> str:
    """Return the sensor name a query value refers to.

    Query values arrive already decoded once. A value naming one of the
    ``declared`` sensors is taken verbatim; otherwise leftover ``+`` or
    percent escapes are decoded.
    """
    name = raw.strip()
    if name in declared:
        return name
    return unquote_plus(name).strip()


def ensure_sensor(product: Product, sensor: str) -> str:
    """Raise ``UnknownSensor`` unless ``sensor`` is declared by ``product``."""
    if sensor not in product.sensors:
        valid = ", ".join(product.sensors) if product.sensors else "none"
        raise ValidationError(
            ValidationReason.UNKNOWN_SENSOR,
            f"Invalid sensor '{sensor}' for product '{product.name}'. Valid sensors: {valid}",
        )
    return sensor
