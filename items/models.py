"""
items/models.py -- Domain dataclasses for found items.

Pure data containers. Defaults (status) and timestamps are applied by
items/store.py at write time, not here.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional


class ItemStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    CLAIMED = "CLAIMED"


@dataclass
class Item:
    """A found object waiting for its owner.

    status is None until the store writes the record; the store substitutes
    AVAILABLE. Only the claim operation changes it afterwards, and only to
    CLAIMED.

    id is None before the record is written to the database.
    """

    title: str
    description: str
    date_found: date
    location_found: str
    status: Optional[ItemStatus] = None
    image_url: Optional[str] = None
    contact_info: Optional[str] = None
    id: Optional[str] = None
    created_at: str = ""  # ISO 8601, set by store on insert
    updated_at: str = ""  # ISO 8601, set by store on every write


@dataclass
class Page:
    """One page of a paginated item query. page is 0-based."""

    page: int
    size: int
    total_elements: int
    content: list[Item] = field(default_factory=list)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.size) if self.size else 0
