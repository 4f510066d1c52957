"""
End-to-end: operator writes through the services, visitors read through
HTTP, all against one SQLite database.
"""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from linkpage.adapters.sqlite.repos import SQLiteClickRepo
from linkpage.api import deps
from linkpage.api.main import app
from linkpage.components.cache import TaggedCache
from linkpage.components.links import LinkService
from linkpage.components.pages import PageService

SECRET = "flow-secret"


@pytest.fixture
def client(monkeypatch, tmp_path, db_path, rules) -> Iterator[TestClient]:
    monkeypatch.setenv("LINKPAGE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("REVALIDATE_SECRET", SECRET)
    settings = deps.Settings()
    assert settings.db_path == db_path

    cache = TaggedCache()
    app.dependency_overrides.update(
        {
            deps.get_settings: lambda: settings,
            deps.get_rules: lambda: rules,
            deps.get_page_cache: lambda: cache,
        }
    )
    yield TestClient(app, follow_redirects=False)
    app.dependency_overrides.clear()


def test_publish_visit_click_edit(client, sqlite_pages, sqlite_links, sqlite_templates, db_path, rules):
    pages = PageService(sqlite_pages, sqlite_templates, rules)
    links = LinkService(sqlite_links, rules)

    page, errors = pages.create_page(slug="acme", display_name="Acme <Studio>")
    assert errors == []
    site, _ = links.create(page.id, "Site", "https://acme.example", link_type="website")
    links.create(page.id, "Shop", "https://shop.example")

    # Visit
    response = client.get("/Acme")
    assert response.status_code == 200
    assert "Acme &lt;Studio&gt;" in response.text
    assert response.text.index("Site") < response.text.index("Shop")

    # Click
    response = client.get(f"/go/{site.id}", headers={"user-agent": "Mozilla/5.0"})
    assert response.status_code == 302
    assert response.headers["location"] == "https://acme.example"
    assert SQLiteClickRepo(db_path).get_counts([site.id]) == {site.id: 1}

    # Edit: cached until purged
    links.update(site.id, {"is_active": False})
    assert "Site" in client.get("/acme").text
    assert client.get(f"/go/{site.id}").status_code == 404

    response = client.post(
        "/api/webhooks/revalidate",
        json={"type": "UPDATE", "table": "links", "record": {"page_id": str(page.id)}},
        headers={"x-revalidate-secret": SECRET},
    )
    assert response.json() == {"ok": True, "revalidated": ["page:acme"]}
    assert "Site" not in client.get("/acme").text


def test_homepage_follows_flag(client, sqlite_pages, sqlite_templates, rules):
    pages = PageService(sqlite_pages, sqlite_templates, rules)
    first, _ = pages.create_page(slug="first", display_name="First")
    second, _ = pages.create_page(slug="second", display_name="Second")

    assert client.get("/").status_code == 404

    pages.set_homepage(first.id)
    assert "First" in client.get("/").text

    pages.set_homepage(second.id)
    client.post(
        "/api/revalidate",
        json={"homepage": True},
        headers={"x-revalidate-secret": SECRET},
    )
    assert "Second" in client.get("/").text
