"""
Render component - Public page HTML builder.

Merges a trusted template with a page's untrusted fields and its links.

Invariants:
- Every interpolated data value is escaped for its context
- Only http(s) URLs reach an href or src attribute
- Inactive links never appear in output
"""

from __future__ import annotations

from ._impl import build_links_html, render_template, select_public_links
from .models import PageFields, RenderOutput, RenderPageInput


def run(input_data: RenderPageInput) -> RenderOutput:
    """Render a full public page."""
    links = select_public_links(input_data.links)
    links_html = build_links_html(links, track_clicks=input_data.track_clicks)
    html = render_template(input_data.template, PageFields.from_page(input_data.page), links_html)
    return RenderOutput(html=html, link_count=len(links))
