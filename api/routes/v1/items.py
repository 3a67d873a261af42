"""
api/routes/v1/items.py -- Found item routes for the UFind REST API.

Routes (in registration order to avoid FastAPI path capture conflicts):
  GET    /items              -- paginated list (public)
  GET    /items/search       -- paginated search (public)
  GET    /items/{item_id}    -- item detail (public)
  POST   /items              -- register a found item (register_item permission)
  PATCH  /items              -- mark an item as claimed (claim_item permission)

/items/search must be registered before /items/{item_id}, otherwise "search"
is captured as an item id.

Rate limits per client IP: ITEMS_READ_RATE_LIMIT on list and search,
ITEMS_WRITE_RATE_LIMIT on registration.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response

from api.limiter import limiter
from api.models import ClaimItemRequest, ItemPageResponse, ItemResponse, RegisterItemRequest
from auth.dependencies import require_permission
from auth.models import User
from auth.permissions import CLAIM_ITEM, REGISTER_ITEM
from core.config import get_settings
from items import service
from items.models import ItemStatus
from items.store import ItemStore

router = APIRouter()

_DEFAULT_PAGE_SIZE = 20
_MAX_PAGE_SIZE = 100


@limiter.limit(get_settings().items_read_rate_limit)
@router.get("/items", response_model=ItemPageResponse)
def list_items(
    request: Request,
    page: int = Query(0, ge=0),
    size: int = Query(_DEFAULT_PAGE_SIZE, ge=1, le=_MAX_PAGE_SIZE),
) -> ItemPageResponse:
    """Return all items, newest first."""
    store: ItemStore = request.app.state.item_store
    return ItemPageResponse.from_page(service.list_items(store, page, size))


@limiter.limit(get_settings().items_read_rate_limit)
@router.get("/items/search", response_model=ItemPageResponse)
def search_items(
    request: Request,
    query: str = Query(min_length=1, max_length=200),
    status: Optional[ItemStatus] = None,
    page: int = Query(0, ge=0),
    size: int = Query(_DEFAULT_PAGE_SIZE, ge=1, le=_MAX_PAGE_SIZE),
) -> ItemPageResponse:
    """Case-insensitive search across title, description, and location found.

    Query params:
      query  -- substring to look for (required)
      status -- AVAILABLE or CLAIMED; omit to search both
    """
    store: ItemStore = request.app.state.item_store
    return ItemPageResponse.from_page(service.search_items(store, query, page, size, status=status))


@router.get("/items/{item_id}", response_model=ItemResponse)
def get_item(request: Request, item_id: UUID) -> ItemResponse:
    store: ItemStore = request.app.state.item_store
    return ItemResponse.from_item(service.get_item(store, str(item_id)))


@limiter.limit(get_settings().items_write_rate_limit)
@router.post("/items", status_code=201)
def register_item(
    request: Request,
    body: RegisterItemRequest,
    current_user: User = Depends(require_permission(REGISTER_ITEM)),
) -> Response:
    """Register a found item. Secretaries and admins only."""
    store: ItemStore = request.app.state.item_store
    service.register_item(store, body.to_item())
    return Response(status_code=201)


@router.patch("/items", status_code=200)
def claim_item(
    request: Request,
    body: ClaimItemRequest,
    current_user: User = Depends(require_permission(CLAIM_ITEM)),
) -> Response:
    """Mark an item as claimed by its owner. Idempotent. Secretaries and admins only."""
    store: ItemStore = request.app.state.item_store
    service.claim_item(store, str(body.id))
    return Response(status_code=200)
