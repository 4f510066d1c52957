"""
Unit tests for PublicPageResolver.
"""

import pytest

from linkpage.components.cache import HOMEPAGE_TAG, TaggedCache
from linkpage.components.public_page import (
    HOMEPAGE,
    NotFound,
    PublicPageResolver,
    RenderedPage,
    ResolveInput,
    ServerError,
    run,
)
from linkpage.domain.entities import Template
from linkpage.ports.repo import DataStoreError
from linkpage.rules.models import LinkRules, Rules


class FailingPageRepo:
    def get_by_slug(self, slug):
        raise DataStoreError("timeout")

    def get_homepage(self):
        raise DataStoreError("timeout")


@pytest.fixture
def resolver(page_repo, link_repo, template_repo, cache, rules) -> PublicPageResolver:
    return PublicPageResolver(page_repo, link_repo, template_repo, cache, rules)


class TestRejections:
    @pytest.mark.parametrize("slug", ["", "   ", "login", "API", "go", "Dashboard", "health"])
    def test_empty_and_reserved_never_touch_store(self, resolver, page_repo, slug) -> None:
        result = resolver.resolve(slug)
        assert isinstance(result, NotFound)
        assert page_repo.lookups == 0

    def test_malformed_slug_is_not_found(self, resolver, page_repo) -> None:
        assert isinstance(resolver.resolve("no_such!slug"), NotFound)
        assert page_repo.lookups == 0

    def test_unknown_slug(self, resolver, page_repo) -> None:
        result = resolver.resolve("nobody")
        assert isinstance(result, NotFound)
        assert result.status_code == 404
        assert page_repo.lookups == 1

    def test_no_homepage(self, resolver) -> None:
        assert isinstance(resolver.resolve(HOMEPAGE), NotFound)


class TestRendering:
    def test_renders_page_with_headers_and_tags(self, resolver, make_page, make_link) -> None:
        page = make_page("acme", display_name="Acme & Co")
        make_link(page, "Shop", "https://shop.example", sort_order=1)
        make_link(page, "Blog", "https://blog.example", sort_order=0)

        result = resolver.resolve("acme")

        assert isinstance(result, RenderedPage)
        assert "Acme &amp; Co" in result.html
        assert result.html.index("Blog") < result.html.index("Shop")
        assert result.headers["X-Frame-Options"] == "DENY"
        assert result.headers["Cache-Control"].startswith("public, s-maxage=")
        assert result.tags == ("page:acme", "template:default")
        assert result.slug == "acme"

    def test_slug_lookup_is_case_insensitive(self, resolver, make_page) -> None:
        make_page("acme")
        result = resolver.resolve("  ACME ")
        assert isinstance(result, RenderedPage)
        assert result.slug == "acme"

    def test_homepage(self, resolver, make_page) -> None:
        make_page("acme", display_name="Home", is_homepage=True)
        result = run(ResolveInput(identifier=HOMEPAGE), resolver)
        assert isinstance(result, RenderedPage)
        assert "Home" in result.html
        assert HOMEPAGE_TAG in result.tags

    def test_missing_template_is_server_error(self, resolver, make_page, caplog) -> None:
        make_page("acme", template_slug="gone")
        result = resolver.resolve("acme")
        assert isinstance(result, ServerError)
        assert result.status_code == 500
        assert "gone" in caplog.text

    def test_data_store_failure_is_server_error(self, link_repo, template_repo, cache) -> None:
        resolver = PublicPageResolver(FailingPageRepo(), link_repo, template_repo, cache)
        assert isinstance(resolver.resolve("acme"), ServerError)
        assert isinstance(resolver.resolve(HOMEPAGE), ServerError)

    def test_tracked_links(self, page_repo, link_repo, template_repo, cache, make_page, make_link):
        rules = Rules(links=LinkRules(track_clicks=True))
        resolver = PublicPageResolver(page_repo, link_repo, template_repo, cache, rules)
        link = make_link(make_page("acme"))
        result = resolver.resolve("acme")
        assert f'href="/go/{link.id}"' in result.html


class TestCaching:
    def test_second_resolve_is_served_from_cache(self, resolver, page_repo, make_page) -> None:
        make_page("acme")
        first = resolver.resolve("acme")
        lookups = page_repo.lookups
        second = resolver.resolve("acme")
        assert second == first
        assert page_repo.lookups == lookups

    def test_purged_page_is_recomputed_before_expiry(
        self, resolver, page_repo, cache: TaggedCache, make_page
    ) -> None:
        page = make_page("acme", display_name="Before")
        assert "Before" in resolver.resolve("acme").html

        page.display_name = "After"
        # Still cached: the store change is invisible until a purge.
        assert "Before" in resolver.resolve("acme").html

        cache.invalidate_tag("page:acme")
        lookups = page_repo.lookups
        assert "After" in resolver.resolve("acme").html
        assert page_repo.lookups == lookups + 1

    def test_template_purge_invalidates_all_pages_using_it(
        self, resolver, template_repo, cache: TaggedCache, make_page
    ) -> None:
        make_page("one")
        make_page("two")
        resolver.resolve("one")
        resolver.resolve("two")

        template = template_repo.get_by_slug("default")
        template_repo.save(
            Template(id=template.id, slug="default", name="Default", html="<p>v2 {{bio}}</p>")
        )
        cache.invalidate_tag("template:default")

        assert resolver.resolve("one").html.startswith("<p>v2")
        assert resolver.resolve("two").html.startswith("<p>v2")

    def test_template_lookup_is_cached(self, resolver, template_repo, make_page) -> None:
        make_page("one")
        make_page("two")
        resolver.resolve("one")
        resolver.resolve("two")
        assert template_repo.lookups == 1

    def test_not_found_is_not_cached(self, resolver, make_page) -> None:
        assert isinstance(resolver.resolve("late"), NotFound)
        make_page("late")
        assert isinstance(resolver.resolve("late"), RenderedPage)

    def test_server_error_is_not_cached(self, resolver, template_repo, make_page) -> None:
        make_page("acme", template_slug="fancy")
        assert isinstance(resolver.resolve("acme"), ServerError)
        template_repo.save(Template(slug="fancy", name="Fancy", html="<b>{{display_name}}</b>"))
        assert isinstance(resolver.resolve("acme"), RenderedPage)

    def test_homepage_purge(self, resolver, cache: TaggedCache, make_page) -> None:
        page = make_page("acme", display_name="Old", is_homepage=True)
        assert "Old" in resolver.resolve(HOMEPAGE).html
        page.display_name = "New"
        cache.invalidate_tag(HOMEPAGE_TAG)
        assert "New" in resolver.resolve(HOMEPAGE).html

    def test_entries_self_heal_after_revalidate_period(
        self, resolver, clock, make_page
    ) -> None:
        page = make_page("acme", display_name="Before")
        resolver.resolve("acme")
        page.display_name = "After"
        clock.advance(86400)
        assert "After" in resolver.resolve("acme").html
