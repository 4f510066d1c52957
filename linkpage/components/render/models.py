"""
Render component - Data models.

Two kinds of text meet in a public page:

- TrustedTemplate: markup authored by privileged users. Inserted as-is.
- UntrustedField: anything stored by page owners. Only reaches output
  through `as_text()` / `as_attr()`, which escape it.

SafeHtml marks fragments that were assembled from escaped parts and may be
substituted verbatim.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from linkpage.domain.entities import Link, Page
from linkpage.domain.sanitize import escape_attr, escape_html, is_safe_url


@dataclass(frozen=True)
class TrustedTemplate:
    """Admin-authored template markup."""

    html: str


@dataclass(frozen=True)
class SafeHtml:
    """Markup whose interpolated data has already been escaped."""

    value: str = ""

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class UntrustedField:
    """User-controlled value; never concatenated raw."""

    raw: str | None = None

    def as_text(self) -> str:
        return escape_html(self.raw or "")

    def as_attr(self) -> str:
        return escape_attr(self.raw or "")

    def as_url_attr(self) -> str:
        """Attribute-escaped URL, or "" unless it passes the scheme allow-list."""
        if not is_safe_url(self.raw):
            return ""
        return escape_attr((self.raw or "").strip())


@dataclass(frozen=True)
class PageFields:
    """The page values a template can reference."""

    display_name: UntrustedField = field(default_factory=UntrustedField)
    bio: UntrustedField = field(default_factory=UntrustedField)
    avatar_url: UntrustedField = field(default_factory=UntrustedField)

    @classmethod
    def from_page(cls, page: Page) -> PageFields:
        return cls(
            display_name=UntrustedField(page.display_name),
            bio=UntrustedField(page.bio),
            avatar_url=UntrustedField(page.avatar_url),
        )


@dataclass(frozen=True)
class LinkPresentation:
    """Presentational hints for one link item."""

    item_class: str
    icon_class: str


# --- Component Inputs / Outputs ---


@dataclass(frozen=True)
class RenderPageInput:
    """Input for rendering a full public page."""

    template: TrustedTemplate
    page: Page
    links: list[Link]
    track_clicks: bool = False


@dataclass(frozen=True)
class RenderOutput:
    """Rendered page."""

    html: str
    link_count: int
