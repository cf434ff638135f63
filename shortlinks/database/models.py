"""Data models for short links."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Link:
    """Represents a stored short link.

    Only ``click_count`` ever changes in the store; instances are snapshots.
    """

    id: int
    original_url: str
    short_code: str
    owner_id: str
    click_count: int = 0
    created_at: Optional[datetime] = None
