"""
Click Redirect Route - `/go/{link_id}`.

Key behaviors:
- 404 for unknown or inactive links (and malformed ids)
- 400 if the stored URL fails the http(s) allow-list
- 302 to the stored URL with Cache-Control: no-store
- The click is counted in a background task after the response is
  decided; its failure is logged and never reaches the visitor
"""

import logging
from urllib.parse import quote
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import Response

from linkpage.adapters.sqlite.repos import SQLiteLinkRepo
from linkpage.api.deps import get_click_tracker, get_link_repo, get_rules
from linkpage.api.responses import plain_error
from linkpage.components.cache import NO_STORE_POLICY, generate_cache_headers
from linkpage.components.clicks import ClickTracker, RecordClickInput, run_record
from linkpage.domain.routes import GO_PATH
from linkpage.domain.sanitize import is_bot_user_agent, is_safe_url, referrer_to_domain
from linkpage.ports.repo import DataStoreError
from linkpage.rules.models import Rules

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(GO_PATH)
def follow_link(
    link_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    links: SQLiteLinkRepo = Depends(get_link_repo),
    tracker: ClickTracker = Depends(get_click_tracker),
    rules: Rules = Depends(get_rules),
) -> Response:
    try:
        parsed_id = UUID(link_id)
    except ValueError:
        return plain_error(404)

    try:
        link = links.get_by_id(parsed_id)
    except DataStoreError:
        logger.exception("Data store failure looking up link %s", parsed_id)
        return plain_error(500)

    if link is None or not link.is_active:
        return plain_error(404)

    if not is_safe_url(link.url):
        logger.warning("Refusing redirect for link %s: unsafe stored URL", link.id)
        return plain_error(400)

    click = RecordClickInput(
        link_id=link.id,
        is_bot=is_bot_user_agent(request.headers.get("user-agent"), rules.clicks.bot_signatures),
        referrer_domain=referrer_to_domain(request.headers.get("referer")),
    )
    background_tasks.add_task(run_record, click, tracker)

    headers = generate_cache_headers(NO_STORE_POLICY)
    headers["Location"] = location_header(link.url)
    return Response(status_code=302, headers=headers)


def location_header(url: str) -> str:
    """The stored URL as sent, with only non-ASCII characters percent-encoded."""
    return "".join(ch if ch.isascii() else quote(ch, safe="") for ch in url.strip())
