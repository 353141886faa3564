"""
Response envelope models shared by all routers.

Every successful response is wrapped as ``{"data": ...}`` (search results
add a ``paging`` block); every failure as ``{"errors": ...}``.
"""

from typing import Any, Generic, List, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    """Success envelope."""
    data: T


class Paging(BaseModel):
    """Paging block of a search result."""
    current_page: int = Field(..., ge=1, description="Requested page (echoed)")
    total_page: int = Field(..., ge=0, description="Number of pages available")
    size: int = Field(..., ge=1, description="Requested page size (echoed)")


class PageResponse(BaseModel, Generic[T]):
    """Success envelope for paginated results."""
    data: List[T]
    paging: Paging


class ErrorResponse(BaseModel):
    """Failure envelope; ``errors`` is a message or a list of field errors."""
    errors: Any = Field(..., description="Error message or validation errors")

    model_config = {
        "json_schema_extra": {
            "example": {
                "errors": "Contact is not found"
            }
        }
    }
