"""Response envelope and shared pieces of the JSON API."""

import math
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base schema serialised with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Pagination(CamelModel):
    """1-indexed page window over a result set."""

    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit))

    @staticmethod
    def skip(page: int, limit: int) -> int:
        return (page - 1) * limit


class ApiResponse(BaseModel, Generic[T]):
    """Successful response envelope."""

    success: bool = True
    message: str | None = None
    data: T
    meta: dict[str, Any] | None = None


def request_meta(**fields: Any) -> dict[str, Any]:
    """Response ``meta`` block: the given fields plus the request instant."""
    return {**fields, "requestedAt": datetime.now(timezone.utc).isoformat()}
