"""
items/service.py -- Item operations used by the API routes.

Thin orchestration over ItemStore: the store returns None/False for missing
rows, this layer turns that into ItemNotFound so the 404 mapping lives in one
place (api/main.py).
"""

from __future__ import annotations

import logging
from typing import Optional

from core.errors import ItemNotFound
from items.models import Item, ItemStatus, Page
from items.store import ItemStore

logger = logging.getLogger("ufind.items")


def register_item(store: ItemStore, item: Item) -> Item:
    """Persist a new found item and return it as stored (id, status, timestamps filled)."""
    item_id = store.create_item(item)
    created = store.get_item(item_id)
    logger.info("Registered item %s (%s)", item_id, item.title)
    return created


def get_item(store: ItemStore, item_id: str) -> Item:
    item = store.get_item(item_id)
    if item is None:
        raise ItemNotFound(f"Item not found with id: {item_id}")
    return item


def list_items(store: ItemStore, page: int, size: int) -> Page:
    return store.list_items(page=page, size=size)


def search_items(store: ItemStore, query: str, page: int, size: int, status: Optional[ItemStatus] = None) -> Page:
    return store.search_items(query, page=page, size=size, status=status)


def claim_item(store: ItemStore, item_id: str) -> None:
    """Mark an item CLAIMED.

    Claiming an already-claimed item succeeds and leaves it CLAIMED. Concurrent
    claims are last-write-wins.
    """
    if not store.update_status(item_id, ItemStatus.CLAIMED):
        raise ItemNotFound("The queried item wasn't found.")
    logger.info("Item %s marked as claimed", item_id)
