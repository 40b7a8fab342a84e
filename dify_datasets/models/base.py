from typing import Generic, TypeVar

from pydantic import BaseModel, Field, model_validator

# Generic type variable for list responses
T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """
    Generic paginated response.

    Every Dify list endpoint returns
    {"data": [...], "has_more": bool, "total": int, "page": int, "limit": int}.
    The child chunk listing reports "total_pages" instead of "has_more", in
    which case has_more is derived from the counts.
    """

    data: list[T] = Field(default_factory=list, description="Items on this page")
    has_more: bool = Field(False, description="Whether a further page exists")
    total: int = Field(0, description="Total number of items")
    page: int = Field(1, description="Current page number (1-based)")
    limit: int = Field(20, description="Page size")

    @model_validator(mode="before")
    @classmethod
    def derive_has_more(cls, values):
        if isinstance(values, dict) and values.get("has_more") is None:
            values = dict(values)
            page = values.get("page") or 1
            limit = values.get("limit") or 0
            total = values.get("total") or 0
            total_pages = values.get("total_pages")
            if total_pages is not None:
                values["has_more"] = page < total_pages
            else:
                values["has_more"] = page * limit < total
        return values

    @property
    def total_pages(self) -> int:
        """Calculate total number of pages."""
        if self.limit == 0:
            return 0
        return (self.total + self.limit - 1) // self.limit
