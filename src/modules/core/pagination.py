"""Pagination primitives shared by listing and search use-cases.

``Page`` is the envelope returned by every paginated repository call:
the slice of items plus enough bookkeeping for a client to navigate.
"""

from __future__ import annotations

import math
from typing import Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

T = TypeVar("T")

#: Largest row offset every supported backend accepts (signed 64-bit).
MAX_OFFSET = 2**63 - 1


def skip_for(page: int, limit: int) -> int:
    """Number of matching records to skip before *page* starts."""
    return (page - 1) * limit


def total_pages_for(total: int, limit: int) -> int:
    """``ceil(total / limit)``; zero when nothing matches."""
    if total <= 0:
        return 0
    return math.ceil(total / limit)


class PageRequest(BaseModel):
    """1-based page number and page size."""

    model_config = ConfigDict(frozen=True)

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1)

    @model_validator(mode="after")
    def offset_within_range(self) -> PageRequest:
        if self.skip + self.limit > MAX_OFFSET:
            raise ValueError(f"Page {self.page} is out of range.")
        return self

    @property
    def skip(self) -> int:
        return skip_for(self.page, self.limit)


class Page(BaseModel, Generic[T]):
    """Immutable pagination envelope."""

    model_config = ConfigDict(frozen=True)

    items: List[T]
    total: int
    page: int
    total_pages: int

    @classmethod
    def build(cls, items: List[T], total: int, page: int, limit: int) -> Page[T]:
        return cls(
            items=items,
            total=total,
            page=page,
            total_pages=total_pages_for(total, limit),
        )
