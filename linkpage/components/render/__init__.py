"""
Render component - Template substitution and links fragment.
"""

from ._impl import (
    PLACEHOLDERS,
    build_avatar_block,
    build_link_item,
    build_links_html,
    link_presentation,
    render_template,
    select_public_links,
)
from .component import run
from .models import (
    LinkPresentation,
    PageFields,
    RenderOutput,
    RenderPageInput,
    SafeHtml,
    TrustedTemplate,
    UntrustedField,
)

__all__ = [
    # Entry point
    "run",
    # Models
    "TrustedTemplate",
    "UntrustedField",
    "SafeHtml",
    "PageFields",
    "LinkPresentation",
    "RenderPageInput",
    "RenderOutput",
    # Functions
    "render_template",
    "build_links_html",
    "build_link_item",
    "build_avatar_block",
    "select_public_links",
    "link_presentation",
    # Constants
    "PLACEHOLDERS",
]
