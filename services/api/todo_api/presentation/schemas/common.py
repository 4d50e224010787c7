import datetime as dt
import math
import typing as t
import pydantic as p

T = t.TypeVar("T")

__all__ = ['ApiResponse', 'PagedData', 'ErrorResponse']


class ApiResponse(p.BaseModel, t.Generic[T]):
    """Envelope of every successful JSON body"""
    success: bool = True
    message: str = "Request successful"
    data: T | None = None

    @classmethod
    def ok(cls, data: T | None = None, message: str = "Request successful") -> "ApiResponse[T]":
        return cls(success=True, message=message, data=data)


class PagedData(p.BaseModel, t.Generic[T]):
    data: list[T]
    total: int
    page: int = p.Field(ge=1)
    per_page: int = p.Field(ge=1)

    @p.computed_field
    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.per_page)


class ErrorResponse(p.BaseModel):
    success: bool = False
    message: str
    kind: str
    path: str
    timestamp: dt.datetime
