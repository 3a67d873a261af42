"""
items/store.py -- SQLAlchemy-backed persistence layer for found items.

Uses SQLAlchemy Core (not ORM) so the dataclasses in items/models.py remain the
authoritative domain representation. Swapping SQLite for PostgreSQL is a
connection string change.

Pattern: Repository + Data Mapper. ItemStore is the repository; _row_to_item is
the mapper. Routes and services never touch SQL directly.

Timestamps: create_item() stamps created_at and updated_at, update_status()
re-stamps updated_at. There are no implicit hooks.

Security: all queries use bound parameters. Search terms go through
icontains(autoescape=True) so "%" and "_" in user input match literally.

Usage:
    store = ItemStore()                               # SQLite default
    store = ItemStore("postgresql://user:pw@host/db") # PostgreSQL
    item_id = store.create_item(item)
    page = store.search_items("wallet", page=0, size=20)
    store.update_status(item_id, ItemStatus.CLAIMED)
    store.close()
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import Column, Date, MetaData, String, Table, create_engine, event, func, or_, select
from sqlalchemy.engine import Engine

from core.config import get_settings
from items.models import Item, ItemStatus, Page

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_items = Table(
    "items",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("title", String(200), nullable=False),
    Column("description", String(500), nullable=False),
    Column("date_found", Date, nullable=False),
    Column("location_found", String(255), nullable=False),
    Column("status", String(20), nullable=False),
    Column("image_url", String(2048)),
    Column("contact_info", String(255)),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)

_SEARCH_COLUMNS = (_items.c.title, _items.c.description, _items.c.location_found)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety (per connection)."""
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ItemStore:
    def __init__(self, db_url: Optional[str] = None) -> None:
        db_url = db_url or get_settings().database_url
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            # FastAPI runs sync handlers in a thread pool, so one pooled
            # connection may be used from several threads.
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        metadata.create_all(self.engine)

    def create_item(self, item: Item) -> str:
        """Insert a new item and return its generated id.

        A missing status becomes AVAILABLE. created_at and updated_at are both
        set to the same instant.
        """
        item_id = str(uuid.uuid4())
        now = _now_iso()
        status = item.status or ItemStatus.AVAILABLE
        with self.engine.begin() as conn:
            conn.execute(
                _items.insert().values(
                    id=item_id,
                    title=item.title,
                    description=item.description,
                    date_found=item.date_found,
                    location_found=item.location_found,
                    status=status.value,
                    image_url=item.image_url,
                    contact_info=item.contact_info,
                    created_at=now,
                    updated_at=now,
                )
            )
        return item_id

    def get_item(self, item_id: str) -> Optional[Item]:
        """Fetch a single item by id. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_items.select().where(_items.c.id == item_id)).fetchone()
        return _row_to_item(row) if row is not None else None

    def list_items(self, page: int = 0, size: int = 20) -> Page:
        """Return one page of all items, newest first."""
        return self._page(None, page, size)

    def search_items(
        self,
        query: str,
        page: int = 0,
        size: int = 20,
        status: Optional[ItemStatus] = None,
    ) -> Page:
        """Case-insensitive substring search over title, description, and location.

        An item matches if any of the three fields contains query. status, when
        given, further restricts the result to that status.
        """
        condition = or_(*(col.icontains(query, autoescape=True) for col in _SEARCH_COLUMNS))
        if status is not None:
            condition = condition & (_items.c.status == status.value)
        return self._page(condition, page, size)

    def update_status(self, item_id: str, status: ItemStatus) -> bool:
        """Set status and re-stamp updated_at.

        Last write wins: there is no version check, so two concurrent updates
        both succeed.

        Returns True if a row was updated, False if item_id was not found.
        """
        with self.engine.begin() as conn:
            result = conn.execute(
                _items.update().where(_items.c.id == item_id).values(status=status.value, updated_at=_now_iso())
            )
        return result.rowcount > 0

    def _page(self, condition, page: int, size: int) -> Page:
        count_stmt = select(func.count()).select_from(_items)
        rows_stmt = _items.select().order_by(_items.c.created_at.desc(), _items.c.id)
        if condition is not None:
            count_stmt = count_stmt.where(condition)
            rows_stmt = rows_stmt.where(condition)
        rows_stmt = rows_stmt.limit(size).offset(page * size)
        with self.engine.connect() as conn:
            total = conn.execute(count_stmt).scalar() or 0
            rows = conn.execute(rows_stmt).fetchall()
        return Page(page=page, size=size, total_elements=total, content=[_row_to_item(r) for r in rows])

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_item(row) -> Item:
    date_found = row.date_found
    if isinstance(date_found, str):
        date_found = date.fromisoformat(date_found)
    return Item(
        id=row.id,
        title=row.title,
        description=row.description,
        date_found=date_found,
        location_found=row.location_found,
        status=ItemStatus(row.status),
        image_url=row.image_url,
        contact_info=row.contact_info,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
