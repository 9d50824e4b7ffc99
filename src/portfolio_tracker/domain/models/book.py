"""Book domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class Book:
    """
    Named portfolio profile (e.g. "personal", "family").

    Transactions belong to exactly one book; each book is evaluated on its own.
    """

    book_id: str
    name: str
    created_at: Optional[datetime] = field(default=None)
