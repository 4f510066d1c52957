from datetime import UTC, date, datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

DEFAULT_TEMPLATE_SLUG = "default"


def _utcnow() -> datetime:
    return datetime.now(UTC)


# --- Templates ---

class Template(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    slug: str
    name: str
    html: str
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

# --- Pages ---

class Page(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    # Opaque identity key from the external auth provider; None for pages
    # managed only through the homepage-editor permission set.
    owner_user_id: str | None = None
    slug: str
    display_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    template_slug: str = DEFAULT_TEMPLATE_SLUG
    is_homepage: bool = False
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

# --- Links ---

class Link(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    page_id: UUID
    label: str
    url: str
    # Free text in storage; the renderer degrades unknown values to a
    # default presentation.
    type: str | None = None
    icon: str | None = None
    sort_order: int = 0
    is_active: bool = True
    created_at: datetime = Field(default_factory=_utcnow)

# --- Click stats ---

class ClickAggregate(BaseModel):
    """Monthly counters for one link. No visitor data."""

    link_id: UUID
    month: date
    human_clicks: int = 0
    bot_clicks: int = 0
