import os
from functools import lru_cache
from pathlib import Path

from fastapi import Depends

from linkpage.adapters.clock import SystemClock
from linkpage.adapters.sqlite.repos import (
    SQLiteClickRepo,
    SQLiteLinkRepo,
    SQLitePageRepo,
    SQLiteTemplateRepo,
)
from linkpage.components.cache import TaggedCache
from linkpage.components.clicks import ClickTracker
from linkpage.components.public_page import PublicPageResolver
from linkpage.components.revalidation import RevalidationGateway
from linkpage.rules.loader import load_rules
from linkpage.rules.models import Rules

PROJECT_ROOT = Path(__file__).resolve().parents[2]


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("LINKPAGE_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "linkpage.db")
        self.rules_path = Path(
            os.environ.get("LINKPAGE_RULES_PATH", str(self.base_dir / "rules.yaml"))
        )
        self.migrations_dir = PROJECT_ROOT / "migrations"
        self.revalidate_secret = os.environ.get("REVALIDATE_SECRET") or None
        self.public_site_url = os.environ.get("PUBLIC_SITE_URL", "http://localhost:8000").rstrip(
            "/"
        )
        self.db_timeout_seconds = float(os.environ.get("LINKPAGE_DB_TIMEOUT_SECONDS", "5"))


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return load_rules(settings.rules_path)


# --- Repos ---
def get_page_repo(settings: Settings = Depends(get_settings)) -> SQLitePageRepo:
    return SQLitePageRepo(settings.db_path, settings.db_timeout_seconds)


def get_link_repo(settings: Settings = Depends(get_settings)) -> SQLiteLinkRepo:
    return SQLiteLinkRepo(settings.db_path, settings.db_timeout_seconds)


def get_template_repo(settings: Settings = Depends(get_settings)) -> SQLiteTemplateRepo:
    return SQLiteTemplateRepo(settings.db_path, settings.db_timeout_seconds)


def get_click_repo(settings: Settings = Depends(get_settings)) -> SQLiteClickRepo:
    return SQLiteClickRepo(settings.db_path, settings.db_timeout_seconds)


# --- Cache ---
@lru_cache
def get_page_cache() -> TaggedCache:
    """Process-wide server-side cache shared by every request."""
    return TaggedCache(clock=SystemClock())


# --- Component Services ---
def get_resolver(
    pages: SQLitePageRepo = Depends(get_page_repo),
    links: SQLiteLinkRepo = Depends(get_link_repo),
    templates: SQLiteTemplateRepo = Depends(get_template_repo),
    cache: TaggedCache = Depends(get_page_cache),
    rules: Rules = Depends(get_rules),
) -> PublicPageResolver:
    return PublicPageResolver(pages, links, templates, cache, rules)


def get_click_tracker(repo: SQLiteClickRepo = Depends(get_click_repo)) -> ClickTracker:
    return ClickTracker(repo)


def get_gateway(
    settings: Settings = Depends(get_settings),
    pages: SQLitePageRepo = Depends(get_page_repo),
    cache: TaggedCache = Depends(get_page_cache),
    rules: Rules = Depends(get_rules),
) -> RevalidationGateway:
    return RevalidationGateway(
        secret=settings.revalidate_secret,
        pages=pages,
        purger=cache,
        default_template_slug=rules.templates.default_slug,
    )
