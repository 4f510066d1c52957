import argparse
import logging
import sys
from typing import Any, NoReturn

import httpx

from linkpage.adapters.sqlite.migrator import SQLiteMigrator
from linkpage.adapters.sqlite.repos import (
    SQLiteClickRepo,
    SQLiteLinkRepo,
    SQLitePageRepo,
    SQLiteTemplateRepo,
)
from linkpage.api.deps import Settings
from linkpage.components.clicks import ClickTracker
from linkpage.components.links import LinkService
from linkpage.components.pages import PageService
from linkpage.components.revalidation import SECRET_HEADER
from linkpage.domain.entities import Page
from linkpage.domain.routes import REVALIDATE_PATH
from linkpage.ports.repo import DataStoreError
from linkpage.rules.loader import load_rules
from linkpage.rules.models import Rules

logger = logging.getLogger("cli")


class CliContext:
    def __init__(self, settings: Settings, rules: Rules) -> None:
        self.settings = settings
        self.rules = rules
        timeout = settings.db_timeout_seconds
        self.pages = SQLitePageRepo(settings.db_path, timeout)
        self.links = SQLiteLinkRepo(settings.db_path, timeout)
        self.templates = SQLiteTemplateRepo(settings.db_path, timeout)
        self.clicks = SQLiteClickRepo(settings.db_path, timeout)
        self.page_service = PageService(self.pages, self.templates, rules)
        self.link_service = LinkService(self.links, rules)
        self.tracker = ClickTracker(self.clicks)

    def page_url(self, page: Page) -> str:
        return f"{self.settings.public_site_url}/{page.slug}"


def get_context(settings: Settings) -> CliContext:
    if not settings.rules_path.exists():
        logger.error("Rules file %s not found.", settings.rules_path)
        sys.exit(1)
    return CliContext(settings, load_rules(settings.rules_path))


def _fail(errors: Any) -> NoReturn:
    for error in errors:
        logger.error("%s: %s", error.code, error.message)
    sys.exit(1)


def _require_page(ctx: CliContext, slug: str) -> Page:
    page = ctx.page_service.get_by_slug(slug)
    if page is None:
        logger.error("Page %s not found.", slug)
        sys.exit(1)
    return page


# --- Handlers ---


def handle_migrate(settings: Settings) -> None:
    applied = SQLiteMigrator(settings.db_path, str(settings.migrations_dir)).run_migrations()
    print(f"Applied {len(applied)} migration(s) to {settings.db_path}.")


def handle_create_page(ctx: CliContext, args: argparse.Namespace) -> None:
    page, errors = ctx.page_service.create_page(
        slug=args.slug,
        owner_user_id=args.owner,
        display_name=args.display_name,
        bio=args.bio,
        avatar_url=args.avatar_url,
        template_slug=args.template,
    )
    if page is None:
        _fail(errors)
    print(f"Created page {page.slug} ({page.id})")
    print(f"URL: {ctx.page_url(page)}")


def handle_add_link(ctx: CliContext, args: argparse.Namespace) -> None:
    page = _require_page(ctx, args.slug)
    link, errors = ctx.link_service.create(
        page_id=page.id,
        label=args.label,
        url=args.url,
        link_type=args.type,
        icon=args.icon,
    )
    if link is None:
        _fail(errors)
    print(f"Added link {link.id} to {page.slug} at position {link.sort_order}")


def handle_set_homepage(ctx: CliContext, args: argparse.Namespace) -> None:
    page = _require_page(ctx, args.slug)
    updated, errors = ctx.page_service.set_homepage(page.id)
    if updated is None:
        _fail(errors)
    print(f"Homepage is now {updated.slug}")


def handle_provision(ctx: CliContext, args: argparse.Namespace) -> None:
    page, errors = ctx.page_service.provision_for_identity(
        owner_user_id=args.owner,
        email=args.email,
        display_name=args.display_name,
    )
    if page is None:
        _fail(errors)
    print(f"Page for {args.owner}: {page.slug}")
    print(f"URL: {ctx.page_url(page)}")


def handle_stats(ctx: CliContext, args: argparse.Namespace) -> None:
    page = _require_page(ctx, args.slug)
    links = ctx.link_service.list_for_page(page.id)
    counts = ctx.tracker.get_click_counts([link.id for link in links])
    print(f"Clicks for {page.slug}:")
    for link in links:
        state = "" if link.is_active else " (inactive)"
        print(f" - {link.label}{state}: {counts.get(link.id, 0)}")


def handle_revalidate(settings: Settings, args: argparse.Namespace) -> None:
    if not settings.revalidate_secret:
        logger.error("REVALIDATE_SECRET is not set.")
        sys.exit(1)

    payload: dict[str, Any] = {}
    if args.page:
        payload["page"] = args.page
    if args.homepage:
        payload["homepage"] = True
    if args.template:
        payload["template_slug"] = args.template
    if not payload:
        logger.error("Nothing to revalidate: pass --page, --homepage or --template.")
        sys.exit(1)

    url = f"{args.url or settings.public_site_url}{REVALIDATE_PATH}"
    try:
        resp = httpx.post(
            url,
            json=payload,
            headers={SECRET_HEADER: settings.revalidate_secret},
            timeout=10.0,
        )
    except httpx.HTTPError as e:
        logger.error("Revalidation request to %s failed: %s", url, e)
        sys.exit(1)

    try:
        body = resp.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        logger.error("Revalidation got a non-JSON reply from %s (%s)", url, resp.status_code)
        sys.exit(1)

    if resp.status_code != 200 or not body.get("ok"):
        logger.error("Revalidation rejected (%s): %s", resp.status_code, body.get("error"))
        sys.exit(1)

    tags = body.get("revalidated", [])
    print(f"Revalidated {len(tags)} tag(s): {', '.join(tags) or '-'}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="linkpage", description="Link page operator CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # migrate
    subparsers.add_parser("migrate", help="Apply pending database migrations")

    # create-page
    create_parser = subparsers.add_parser("create-page", help="Create a public page")
    create_parser.add_argument("slug")
    create_parser.add_argument("--display-name")
    create_parser.add_argument("--bio")
    create_parser.add_argument("--avatar-url")
    create_parser.add_argument("--template", help="Template slug (default from rules)")
    create_parser.add_argument("--owner", help="Owner identity key")

    # add-link
    link_parser = subparsers.add_parser("add-link", help="Append a link to a page")
    link_parser.add_argument("slug")
    link_parser.add_argument("label")
    link_parser.add_argument("url")
    link_parser.add_argument("--type", help="social, website or other")
    link_parser.add_argument("--icon")

    # set-homepage
    home_parser = subparsers.add_parser("set-homepage", help="Serve a page at /")
    home_parser.add_argument("slug")

    # provision
    provision_parser = subparsers.add_parser(
        "provision", help="Get or create the page of an identity"
    )
    provision_parser.add_argument("owner", help="Owner identity key")
    provision_parser.add_argument("email")
    provision_parser.add_argument("--display-name")

    # stats
    stats_parser = subparsers.add_parser("stats", help="Human click counts per link")
    stats_parser.add_argument("slug")

    # revalidate
    revalidate_parser = subparsers.add_parser(
        "revalidate", help="Ask a running server to purge cache tags"
    )
    revalidate_parser.add_argument("--page", help="Page slug")
    revalidate_parser.add_argument("--homepage", action="store_true")
    revalidate_parser.add_argument("--template", help="Template slug")
    revalidate_parser.add_argument("--url", help="Server base URL (default PUBLIC_SITE_URL)")

    return parser


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(level=logging.INFO)
    args = build_parser().parse_args(argv)
    settings = Settings()

    if args.command == "migrate":
        handle_migrate(settings)
        return
    if args.command == "revalidate":
        handle_revalidate(settings, args)
        return

    ctx = get_context(settings)
    handlers = {
        "create-page": handle_create_page,
        "add-link": handle_add_link,
        "set-homepage": handle_set_homepage,
        "provision": handle_provision,
        "stats": handle_stats,
    }
    try:
        handlers[args.command](ctx, args)
    except DataStoreError as e:
        logger.error("Data store error: %s", e)
        sys.exit(1)
    if args.command in ("create-page", "add-link", "set-homepage"):
        logger.info("Run `linkpage revalidate` to refresh pages cached by a running server.")


if __name__ == "__main__":
    main()
