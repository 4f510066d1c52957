"""
PublicPageResolver - slug (or homepage) to rendered HTML.

Key behaviors:
- Empty, malformed and reserved slugs are NotFound without a store query
- Slugs are case-insensitive; lookups use the lowercased form
- A page whose template is missing is a ServerError, never a 404
- A store failure is a ServerError; details go to the log only
- Successful renders are cached under the page tag, the homepage tag
  (when flagged) and the template tag
- Template markup is cached separately under its own template tag
"""

from __future__ import annotations

import logging

from linkpage.components.cache import (
    HOMEPAGE_CACHE_KEY,
    TaggedCache,
    page_cache_key,
    page_cache_tags,
    public_page_headers,
    template_cache_key,
    template_tag,
)
from linkpage.components.render import RenderPageInput, TrustedTemplate
from linkpage.components.render import run as run_render
from linkpage.domain.entities import Page, Template
from linkpage.domain.sanitize import is_reserved_slug, is_valid_slug
from linkpage.ports.repo import DataStoreError
from linkpage.rules.models import Rules

from .models import (
    HomepageIdentifier,
    NotFound,
    RenderedPage,
    ResolveResult,
    ServerError,
)
from .ports import ActiveLinksPort, PageLookupPort, TemplateLookupPort

logger = logging.getLogger(__name__)


def normalize_slug(raw: str) -> str:
    return raw.strip().lower()


def precheck_slug(slug: str, rules: Rules) -> NotFound | None:
    """NotFound for identifiers that can never name a page."""
    if not slug:
        return NotFound(reason="empty")
    if is_reserved_slug(slug):
        return NotFound(reason="reserved")
    if not is_valid_slug(slug, rules.slugs.min_length, rules.slugs.max_length):
        return NotFound(reason="invalid")
    return None


class PublicPageResolver:
    """Resolves public pages through the tagged cache."""

    def __init__(
        self,
        pages: PageLookupPort,
        links: ActiveLinksPort,
        templates: TemplateLookupPort,
        cache: TaggedCache,
        rules: Rules | None = None,
    ) -> None:
        self._pages = pages
        self._links = links
        self._templates = templates
        self._cache = cache
        self._rules = rules or Rules()

    def resolve(self, identifier: str | HomepageIdentifier) -> ResolveResult:
        if isinstance(identifier, HomepageIdentifier):
            slug = None
            key = HOMEPAGE_CACHE_KEY
        else:
            slug = normalize_slug(identifier)
            rejected = precheck_slug(slug, self._rules)
            if rejected is not None:
                return rejected
            key = page_cache_key(slug)

        cached = self._cache.get(key)
        if isinstance(cached, RenderedPage):
            return cached

        since = self._cache.snapshot()
        try:
            outcome = self._render(slug)
        except DataStoreError:
            logger.exception("Data store failure resolving %s", key)
            return ServerError(reason="data_store_unavailable")

        if isinstance(outcome, RenderedPage):
            self._cache.set(
                key,
                outcome,
                outcome.tags,
                ttl_seconds=self._rules.cache.revalidate_seconds,
                since=since,
            )
        return outcome

    def _render(self, slug: str | None) -> ResolveResult:
        page: Page | None
        if slug is None:
            page = self._pages.get_homepage()
        else:
            page = self._pages.get_by_slug(slug)
        if page is None:
            return NotFound(reason="page_not_found")

        template = self._load_template(page.template_slug)
        if template is None:
            logger.error(
                "Page %s references missing template %r", page.slug, page.template_slug
            )
            return ServerError(reason="template_missing")

        links = self._links.list_active_for_page(page.id)
        output = run_render(
            RenderPageInput(
                template=TrustedTemplate(template.html),
                page=page,
                links=links,
                track_clicks=self._rules.links.track_clicks,
            )
        )

        tags = page_cache_tags(page) + [template_tag(page.template_slug)]
        return RenderedPage(
            html=output.html,
            headers=public_page_headers(self._rules.cache),
            tags=tuple(tags),
            slug=page.slug,
        )

    def _load_template(self, template_slug: str) -> Template | None:
        return self._cache.get_or_compute(
            template_cache_key(template_slug),
            lambda: self._templates.get_by_slug(template_slug),
            [template_tag(template_slug)],
            ttl_seconds=self._rules.cache.revalidate_seconds,
        )
