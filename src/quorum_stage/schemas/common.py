"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

import math

from pydantic import BaseModel, Field


class PageMeta(BaseModel):
    """Offset pagination metadata returned by list endpoints."""

    page: int = Field(..., ge=1, description="1-based page number")
    limit: int = Field(..., ge=1, description="Page size")
    total: int = Field(..., ge=0, description="Total matching items")
    pages: int = Field(..., ge=0, description="Total number of pages")

    @classmethod
    def build(cls, *, page: int, limit: int, total: int) -> PageMeta:
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit))


class MessageResponse(BaseModel):
    """Plain acknowledgement payload."""

    message: str
