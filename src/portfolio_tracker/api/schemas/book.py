"""Pydantic schemas for book endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class BookCreate(BaseModel):
    """Request schema for creating a book."""

    name: str = Field(..., min_length=1, max_length=255, description="Unique book name")


class BookResponse(BaseModel):
    """Response schema for a single book."""

    model_config = {"from_attributes": True}

    book_id: str
    name: str
    created_at: Optional[datetime] = None


class BookListResponse(BaseModel):
    """Response schema for listing books."""

    books: list[BookResponse]
    count: int
