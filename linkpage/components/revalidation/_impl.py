"""
Invalidation gateway - maps manual requests and row-change events to the
minimal set of cache tags to purge.

Key behaviors:
- Shared-secret header, compared in constant time; no secret configured
  means every call is rejected
- Rejected calls learn nothing about what would have been purged
- Unknown tables and unrecognized shapes are a no-op success (webhooks are
  delivered at least once and may carry anything)
- The response lists exactly the tags purged, in purge order, deduplicated
"""

from __future__ import annotations

import hmac
import json
import logging
from typing import Any
from uuid import UUID

from linkpage.components.cache import HOMEPAGE_TAG, page_tag, template_tag
from linkpage.domain.entities import DEFAULT_TEMPLATE_SLUG
from linkpage.domain.sanitize import is_reserved_slug
from linkpage.ports.repo import DataStoreError

from .models import ChangeEvent, ManualRevalidateRequest, RevalidatePayload, RevalidationResult
from .ports import PageByIdPort, TagPurgePort

logger = logging.getLogger(__name__)

SECRET_HEADER = "x-revalidate-secret"

_TRUTHY = (True, 1, "1", "true", "t")


def is_authorized(provided: str | None, expected: str | None) -> bool:
    if not expected or not provided:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def _dedupe(tags: list[str]) -> list[str]:
    return list(dict.fromkeys(tags))


def _as_row(value: Any) -> dict[str, Any] | None:
    return value if isinstance(value, dict) else None


def _non_empty_str(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _is_truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return value in _TRUTHY


# --- Parsing ---


def parse_payload(
    body: Any, default_template_slug: str = DEFAULT_TEMPLATE_SLUG
) -> RevalidatePayload | None:
    """
    Classify a decoded JSON body.

    Change events carry `table` plus `record` and/or `old_record`. Manual
    requests carry `page` (or `slug`), `homepage: true`, `template_slug`,
    or `template: true` for the default template. Anything else is None.
    """
    if not isinstance(body, dict):
        return None

    table = _non_empty_str(body.get("table"))
    if table and ("record" in body or "old_record" in body):
        return ChangeEvent(
            table=table.lower(),
            type=str(body.get("type") or "").upper(),
            record=_as_row(body.get("record")),
            old_record=_as_row(body.get("old_record")),
        )

    page = _non_empty_str(body.get("page")) or _non_empty_str(body.get("slug"))
    homepage = body.get("homepage") is True

    template_slug = _non_empty_str(body.get("template_slug"))
    if template_slug is None:
        template = body.get("template")
        if template is True:
            template_slug = default_template_slug
        else:
            template_slug = _non_empty_str(template)

    if page is None and not homepage and template_slug is None:
        return None
    return ManualRevalidateRequest(page=page, homepage=homepage, template_slug=template_slug)


# --- Mapping ---


def tags_for_manual(request: ManualRevalidateRequest) -> list[str]:
    tags: list[str] = []
    if request.homepage:
        tags.append(HOMEPAGE_TAG)
    if request.template_slug:
        tags.append(template_tag(request.template_slug))
    if request.page:
        slug = request.page.strip().lower()
        if slug and not is_reserved_slug(slug):
            tags.append(page_tag(slug))
    return _dedupe(tags)


def _rows(event: ChangeEvent) -> list[dict[str, Any]]:
    # Old row first so a rename purges old then new.
    return [row for row in (event.old_record, event.record) if row]


def tags_for_change(event: ChangeEvent, pages: PageByIdPort) -> list[str]:
    """
    Tags invalidated by one row change.

    Raises DataStoreError if the owning page of a link cannot be looked up.
    """
    rows = _rows(event)
    tags: list[str] = []

    if event.table == "templates":
        for row in rows:
            slug = _non_empty_str(row.get("slug"))
            if slug:
                tags.append(template_tag(slug))

    elif event.table == "pages":
        for row in rows:
            slug = _non_empty_str(row.get("slug"))
            if slug:
                tags.append(page_tag(slug))
        if any(_is_truthy(row.get("is_homepage")) for row in rows):
            tags.append(HOMEPAGE_TAG)

    elif event.table == "links":
        page_ids = _dedupe([str(row["page_id"]) for row in rows if row.get("page_id")])
        for raw_id in page_ids:
            try:
                page_id = UUID(raw_id)
            except ValueError:
                logger.warning("Ignoring link event with malformed page_id")
                continue
            page = pages.get_by_id(page_id)
            if page is None:
                continue
            tags.append(page_tag(page.slug))
            if page.is_homepage:
                tags.append(HOMEPAGE_TAG)

    return _dedupe(tags)


# --- Gateway ---


class RevalidationGateway:
    """Authenticates, decodes, maps and purges."""

    def __init__(
        self,
        secret: str | None,
        pages: PageByIdPort,
        purger: TagPurgePort,
        default_template_slug: str = DEFAULT_TEMPLATE_SLUG,
    ) -> None:
        self._secret = secret
        self._pages = pages
        self._purger = purger
        self._default_template_slug = default_template_slug

    def handle(self, provided_secret: str | None, raw_body: bytes) -> RevalidationResult:
        if not is_authorized(provided_secret, self._secret):
            logger.warning("Rejected revalidation request: bad or missing secret")
            return RevalidationResult(ok=False, error="unauthorized", status_code=401)

        try:
            body = json.loads(raw_body) if raw_body.strip() else {}
        except ValueError:
            return RevalidationResult(ok=False, error="invalid_json", status_code=400)

        payload = parse_payload(body, self._default_template_slug)
        if payload is None:
            logger.info("Revalidation request with unrecognized shape; nothing to purge")
            return RevalidationResult(ok=True)

        try:
            if isinstance(payload, ChangeEvent):
                tags = tags_for_change(payload, self._pages)
            else:
                tags = tags_for_manual(payload)
        except DataStoreError:
            logger.exception("Data store failure while mapping revalidation event")
            return RevalidationResult(ok=False, error="data_store_unavailable", status_code=500)

        if tags:
            self._purger.invalidate_tags(tags)
        logger.info("Revalidated tags: %s", tags)
        return RevalidationResult(ok=True, revalidated=tuple(tags))
