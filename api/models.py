"""
API request and response models for the UFind REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
items/models.py, which own the internal domain representation. Route handlers
map between the two.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from auth.models import User
from items.models import Item, ItemStatus, Page

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Deliberately loose: one "@" with something on both sides. Deliverability is
# not our problem, uniqueness is.
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+$"

# ---------------------------------------------------------------------------
# Auth -- request models
# ---------------------------------------------------------------------------


class LoginRequest(BaseModel):
    """Request body for POST /api/v1/auth/login."""

    model_config = ConfigDict(str_strip_whitespace=True)

    email: str = Field(min_length=3, max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(min_length=1, max_length=72)


class RegisterUserRequest(BaseModel):
    """Request body for POST /api/v1/auth/register.

    role is a plain string on purpose: an unknown role is a domain error
    (InvalidRole, 401) rather than a 422 validation error.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    username: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(min_length=8, max_length=72)
    role: str = Field(min_length=1, max_length=30)


# ---------------------------------------------------------------------------
# Auth -- response models
# ---------------------------------------------------------------------------


class SuccessResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool = True


class MeResponse(BaseModel):
    """Response for GET /api/v1/auth/me."""

    model_config = ConfigDict(frozen=True)

    id: str
    username: str
    email: str
    role: str

    @classmethod
    def from_user(cls, user: User) -> "MeResponse":
        return cls(id=user.id, username=user.username, email=user.email, role=user.role.value)


# ---------------------------------------------------------------------------
# Items -- request models
# ---------------------------------------------------------------------------


class RegisterItemRequest(BaseModel):
    """Request body for POST /api/v1/items. status defaults to AVAILABLE when omitted."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=500)
    date_found: date
    location_found: str = Field(min_length=1, max_length=255)
    status: Optional[ItemStatus] = None
    image_url: Optional[str] = Field(default=None, max_length=2048)
    contact_info: Optional[str] = Field(default=None, max_length=255)

    def to_item(self) -> Item:
        return Item(
            title=self.title,
            description=self.description,
            date_found=self.date_found,
            location_found=self.location_found,
            status=self.status,
            image_url=self.image_url,
            contact_info=self.contact_info,
        )


class ClaimItemRequest(BaseModel):
    """Request body for PATCH /api/v1/items."""

    id: UUID


# ---------------------------------------------------------------------------
# Items -- response models
# ---------------------------------------------------------------------------


class ItemResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    date_found: date
    location_found: str
    status: ItemStatus
    image_url: Optional[str]
    contact_info: Optional[str]
    created_at: str
    updated_at: str

    @classmethod
    def from_item(cls, item: Item) -> "ItemResponse":
        return cls(
            id=item.id,
            title=item.title,
            description=item.description,
            date_found=item.date_found,
            location_found=item.location_found,
            status=item.status,
            image_url=item.image_url,
            contact_info=item.contact_info,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )


class ItemPageResponse(BaseModel):
    """A page of items. page is 0-based."""

    model_config = ConfigDict(frozen=True)

    content: list[ItemResponse]
    page: int
    size: int
    total_elements: int
    total_pages: int

    @classmethod
    def from_page(cls, page: Page) -> "ItemPageResponse":
        return cls(
            content=[ItemResponse.from_item(i) for i in page.content],
            page=page.page,
            size=page.size,
            total_elements=page.total_elements,
            total_pages=page.total_pages,
        )


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Error envelope returned on every handled 4xx/5xx response."""

    model_config = ConfigDict(frozen=True)

    error: str


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]
