"""
Standard API Response Models

Pagination envelope shared by the feedback and notification listings.
"""

import math

from pydantic import BaseModel, Field


class PaginationMeta(BaseModel):
    """Standard pagination metadata"""
    page: int = Field(description="Current page number (1-indexed)")
    limit: int = Field(description="Number of items per page")
    total: int = Field(description="Total number of items")
    total_pages: int = Field(description="Total number of pages")
    has_next: bool = Field(description="Whether there is a next page")
    has_prev: bool = Field(description="Whether there is a previous page")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit) if limit else 0,
            has_next=page * limit < total,
            has_prev=page > 1,
        )


def page_offset(page: int, limit: int) -> int:
    """Offset of the first row of a 1-indexed page."""
    return (max(page, 1) - 1) * limit
