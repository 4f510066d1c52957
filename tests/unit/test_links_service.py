"""
Unit tests for LinkService.

Tests the functional core business logic without HTTP concerns.
"""

from uuid import uuid4

import pytest

from linkpage.components.links import (
    CreateLinkInput,
    DeleteLinkInput,
    GetLinkInput,
    LinkService,
    ListLinksInput,
    ReorderLinksInput,
    UpdateLinkInput,
    run_create,
    run_delete,
    run_get,
    run_list,
    run_reorder,
    run_update,
    validate_link_data,
)


@pytest.fixture
def page_id():
    return uuid4()


@pytest.fixture
def service(link_repo, rules):
    """Create service with in-memory repo."""
    return LinkService(repo=link_repo, rules=rules)


# --- Create Tests ---


def test_create_link_success(service: LinkService, page_id):
    """New links are active and go to the end."""
    link, errors = service.create(
        page_id=page_id,
        label="Instagram",
        url="https://instagram.com/acme",
        link_type="social",
        icon="instagram",
    )

    assert errors == []
    assert link is not None
    assert link.page_id == page_id
    assert link.label == "Instagram"
    assert link.type == "social"
    assert link.icon == "instagram"
    assert link.is_active is True
    assert link.sort_order == 0


def test_create_appends_after_max_sort_order(service: LinkService, link_repo, page_id):
    first, _ = service.create(page_id=page_id, label="A", url="https://a.example")
    first.sort_order = 7
    link_repo.save(first)

    second, _ = service.create(page_id=page_id, label="B", url="https://b.example")
    assert second.sort_order == 8


def test_create_order_is_per_page(service: LinkService, page_id):
    service.create(page_id=page_id, label="A", url="https://a.example")
    other, _ = service.create(page_id=uuid4(), label="B", url="https://b.example")
    assert other.sort_order == 0


def test_create_strips_and_normalizes(service: LinkService, page_id):
    link, _ = service.create(
        page_id=page_id,
        label="  Site  ",
        url="  https://site.example  ",
        link_type=" Website ",
        icon="",
    )
    assert link.label == "Site"
    assert link.url == "https://site.example"
    assert link.type == "website"
    assert link.icon is None


@pytest.mark.parametrize(
    ("label", "url", "code"),
    [
        ("", "https://a.example", "label_required"),
        ("x" * 101, "https://a.example", "label_too_long"),
        ("A", "", "url_required"),
        ("A", "javascript:alert(1)", "url_invalid_scheme"),
        ("A", "ftp://files.example", "url_invalid_scheme"),
        ("A", "https://a.example/" + "x" * 2048, "url_too_long"),
    ],
)
def test_create_validation(service: LinkService, page_id, label, url, code):
    link, errors = service.create(page_id=page_id, label=label, url=url)
    assert link is None
    assert [e.code for e in errors] == [code]


def test_type_and_icon_vocabulary():
    errors = validate_link_data(link_type="myspace", icon="geocities")
    assert [e.code for e in errors] == ["type_invalid", "icon_invalid"]
    assert validate_link_data(link_type="", icon="") == []


# --- Update / Delete ---


def test_update_fields(service: LinkService, page_id):
    link, _ = service.create(page_id=page_id, label="Old", url="https://old.example")
    updated, errors = service.update(link.id, {"label": "New", "is_active": False})
    assert errors == []
    assert updated.label == "New"
    assert updated.is_active is False
    assert updated.url == "https://old.example"


def test_update_with_none_keeps_required_fields(service: LinkService, page_id):
    link, _ = service.create(page_id=page_id, label="Keep", url="https://keep.example")
    updated, errors = service.update(link.id, {"label": None, "url": None, "is_active": None})
    assert errors == []
    assert updated is not None
    stored = service.get_by_id(link.id)
    assert stored.label == "Keep"
    assert stored.url == "https://keep.example"
    assert stored.is_active is True


def test_update_rejects_unsafe_url(service: LinkService, page_id):
    link, _ = service.create(page_id=page_id, label="A", url="https://a.example")
    updated, errors = service.update(link.id, {"url": "data:text/html,x"})
    assert updated is None
    assert errors[0].code == "url_invalid_scheme"
    assert service.get_by_id(link.id).url == "https://a.example"


def test_update_missing_link(service: LinkService):
    updated, errors = service.update(uuid4(), {"label": "x"})
    assert updated is None
    assert errors[0].code == "link_not_found"


def test_delete(service: LinkService, page_id):
    link, _ = service.create(page_id=page_id, label="A", url="https://a.example")
    assert service.delete(link.id) == (True, [])
    assert service.get_by_id(link.id) is None
    success, errors = service.delete(link.id)
    assert success is False
    assert errors[0].code == "link_not_found"


# --- Reorder ---


def test_reorder_assigns_positions(service: LinkService, page_id):
    a, _ = service.create(page_id=page_id, label="A", url="https://a.example")
    b, _ = service.create(page_id=page_id, label="B", url="https://b.example")
    c, _ = service.create(page_id=page_id, label="C", url="https://c.example")

    links, errors = service.reorder(page_id, [c.id, a.id, b.id])

    assert errors == []
    assert [link.label for link in links] == ["C", "A", "B"]
    assert [link.sort_order for link in links] == [0, 1, 2]


def test_reorder_rejects_foreign_links(service: LinkService, page_id):
    mine, _ = service.create(page_id=page_id, label="Mine", url="https://a.example")
    theirs, _ = service.create(page_id=uuid4(), label="Theirs", url="https://b.example")

    links, errors = service.reorder(page_id, [theirs.id, mine.id])

    assert links == []
    assert [e.code for e in errors] == ["link_not_on_page"]
    assert service.get_by_id(theirs.id).sort_order == 0
    assert service.get_by_id(mine.id).sort_order == 0


def test_reorder_rejects_duplicates(service: LinkService, page_id):
    a, _ = service.create(page_id=page_id, label="A", url="https://a.example")
    _, errors = service.reorder(page_id, [a.id, a.id])
    assert errors[0].code == "link_ids_duplicate"


# --- Component entry points ---


def test_run_functions(service: LinkService, page_id):
    created = run_create(
        CreateLinkInput(page_id=page_id, label="A", url="https://a.example"), service
    )
    assert created.success is True

    fetched = run_get(GetLinkInput(link_id=created.link.id), service)
    assert fetched.link == created.link

    updated = run_update(UpdateLinkInput(link_id=created.link.id, label="B"), service)
    assert updated.link.label == "B"

    listed = run_list(ListLinksInput(page_id=page_id), service)
    assert listed.total == 1

    reordered = run_reorder(ReorderLinksInput(page_id=page_id, link_ids=(uuid4(),)), service)
    assert reordered.errors[0].code == "link_not_on_page"

    deleted = run_delete(DeleteLinkInput(link_id=created.link.id), service)
    assert deleted.success is True
    assert run_get(GetLinkInput(link_id=created.link.id), service).success is False
