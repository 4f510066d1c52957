"""
Template renderer and links fragment builder.

Functional Core - pure functions, no I/O.

Key behaviors:
- Literal token substitution only ({{display_name}}, {{bio}},
  {{avatar_url}}, {{avatar_block}}, {{links}}); unknown tokens are left
  untouched.
- Substitution is single-pass, so data that happens to contain a token is
  never expanded.
- Every substituted data value is escaped for its context; URLs must pass
  the http(s) allow-list or they are dropped.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from linkpage.domain.entities import Link
from linkpage.domain.routes import GO
from linkpage.domain.sanitize import escape_attr, escape_html, is_safe_url

from .models import LinkPresentation, PageFields, SafeHtml, TrustedTemplate, UntrustedField

PLACEHOLDERS = ("display_name", "bio", "avatar_url", "avatar_block", "links")

_PLACEHOLDER_RE = re.compile(r"\{\{(" + "|".join(PLACEHOLDERS) + r")\}\}")

# --- Presentation lookup ---

DEFAULT_ITEM_CLASS = "link-item link-default"
DEFAULT_ICON_CLASS = "icon-link"

TYPE_ITEM_CLASSES = {
    "social": "link-item link-social",
    "website": "link-item link-website",
    "other": "link-item link-other",
}

ICON_CLASSES = {
    "facebook": "icon-facebook",
    "instagram": "icon-instagram",
    "youtube": "icon-youtube",
    "twitter": "icon-twitter",
    "linkedin": "icon-linkedin",
    "link": "icon-link",
}


def link_presentation(link_type: str | None, icon: str | None) -> LinkPresentation:
    """Map stored type/icon to CSS hints. Unknown values degrade to defaults."""
    type_key = (link_type or "").strip().lower()
    icon_key = (icon or "").strip().lower()

    if not icon_key:
        icon_class = ""
    else:
        icon_class = ICON_CLASSES.get(icon_key, DEFAULT_ICON_CLASS)

    return LinkPresentation(
        item_class=TYPE_ITEM_CLASSES.get(type_key, DEFAULT_ITEM_CLASS),
        icon_class=icon_class,
    )


# --- Links fragment ---


def select_public_links(links: Iterable[Link]) -> list[Link]:
    """
    Active links in display order.

    Stable sort on sort_order, so ties keep the store's insertion order.
    """
    return sorted((link for link in links if link.is_active), key=lambda link: link.sort_order)


def _link_href(link: Link, track_clicks: bool) -> str:
    if track_clicks:
        return f"/{GO}/{link.id}"
    return escape_attr(link.url.strip())


def build_link_item(link: Link, track_clicks: bool = False) -> str:
    """One <li> for a link whose URL is already known to be safe."""
    presentation = link_presentation(link.type, link.icon)
    icon_html = ""
    if presentation.icon_class:
        icon_html = f'<span class="link-icon {presentation.icon_class}" aria-hidden="true"></span>'

    return (
        f'<li class="{presentation.item_class}">'
        f'<a href="{_link_href(link, track_clicks)}" rel="noopener noreferrer">'
        f"{icon_html}"
        f'<span class="link-label">{escape_html(link.label)}</span>'
        "</a></li>"
    )


def build_links_html(links: Sequence[Link], track_clicks: bool = False) -> SafeHtml:
    """
    Build the {{links}} fragment.

    `links` must already be filtered to active links and ordered (see
    `select_public_links`); an inactive link is a caller bug and raises
    ValueError instead of being dropped quietly. Links with unsafe URLs are
    omitted entirely.
    """
    items: list[str] = []
    for link in links:
        if not link.is_active:
            raise ValueError(f"inactive link {link.id} passed to build_links_html")
        if not is_safe_url(link.url):
            continue
        items.append(build_link_item(link, track_clicks))

    if not items:
        return SafeHtml("")

    return SafeHtml('<ul class="links">\n' + "\n".join(items) + "\n</ul>")


# --- Avatar ---


def initials(display_name: UntrustedField) -> str:
    """Up to two leading letters of the display name, uppercased (raw)."""
    words = (display_name.raw or "").split()
    return "".join(word[0] for word in words[:2]).upper()


def build_avatar_block(fields: PageFields) -> SafeHtml:
    """
    Ready-made avatar markup.

    An <img> when the avatar URL is safe, an initials badge when there is a
    display name, otherwise nothing.
    """
    src = fields.avatar_url.as_url_attr()
    if src:
        return SafeHtml(
            f'<img class="avatar" src="{src}" alt="{fields.display_name.as_attr()}" '
            'width="96" height="96">'
        )

    letters = initials(fields.display_name)
    if letters:
        return SafeHtml(
            f'<div class="avatar avatar-initials" aria-hidden="true">{escape_html(letters)}</div>'
        )

    return SafeHtml("")


# --- Template ---


def render_template(template: TrustedTemplate, fields: PageFields, links_html: SafeHtml) -> str:
    """Substitute the recognized placeholders in a single pass."""
    values = {
        "display_name": fields.display_name.as_text(),
        "bio": fields.bio.as_text(),
        "avatar_url": fields.avatar_url.as_url_attr(),
        "avatar_block": build_avatar_block(fields).value,
        "links": links_html.value,
    }
    return _PLACEHOLDER_RE.sub(lambda match: values[match.group(1)], template.html)
