"""
HTTP fixtures: the real application with its data-store dependencies
swapped for the in-memory repos from the top-level conftest.
"""

from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from linkpage.api import deps
from linkpage.api.main import app as linkpage_app

REVALIDATE_SECRET = "test-revalidate-secret"


@pytest.fixture
def settings(monkeypatch, tmp_path) -> deps.Settings:
    monkeypatch.setenv("REVALIDATE_SECRET", REVALIDATE_SECRET)
    monkeypatch.setenv("LINKPAGE_DATA_DIR", str(tmp_path))
    return deps.Settings()


@pytest.fixture
def app(settings, rules, cache, page_repo, link_repo, template_repo, click_repo) -> Iterator[FastAPI]:
    """Application wired to in-memory repos; overrides removed afterwards."""
    linkpage_app.dependency_overrides.update(
        {
            deps.get_settings: lambda: settings,
            deps.get_rules: lambda: rules,
            deps.get_page_cache: lambda: cache,
            deps.get_page_repo: lambda: page_repo,
            deps.get_link_repo: lambda: link_repo,
            deps.get_template_repo: lambda: template_repo,
            deps.get_click_repo: lambda: click_repo,
        }
    )
    yield linkpage_app
    linkpage_app.dependency_overrides.clear()


@pytest.fixture
def auth() -> dict[str, str]:
    return {"x-revalidate-secret": REVALIDATE_SECRET}


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Test client over overridden deps; the lifespan is not entered here."""
    return TestClient(app, follow_redirects=False)
