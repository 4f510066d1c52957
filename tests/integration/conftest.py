from pathlib import Path

import pytest

from linkpage.adapters.sqlite.migrator import SQLiteMigrator
from linkpage.adapters.sqlite.repos import (
    SQLiteClickRepo,
    SQLiteLinkRepo,
    SQLitePageRepo,
    SQLiteTemplateRepo,
)

MIGRATIONS_DIR = Path(__file__).resolve().parents[2] / "migrations"


@pytest.fixture
def db_path(tmp_path) -> str:
    """Fully migrated throwaway database."""
    path = str(tmp_path / "linkpage.db")
    SQLiteMigrator(path, str(MIGRATIONS_DIR)).run_migrations()
    return path


@pytest.fixture
def sqlite_pages(db_path) -> SQLitePageRepo:
    return SQLitePageRepo(db_path)


@pytest.fixture
def sqlite_links(db_path) -> SQLiteLinkRepo:
    return SQLiteLinkRepo(db_path)


@pytest.fixture
def sqlite_templates(db_path) -> SQLiteTemplateRepo:
    return SQLiteTemplateRepo(db_path)


@pytest.fixture
def sqlite_clicks(db_path) -> SQLiteClickRepo:
    return SQLiteClickRepo(db_path)
