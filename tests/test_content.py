"""Tests for the WordPress REST client and content normalisation."""

from __future__ import annotations

import typing as typ

import pytest
import requests

from aiaiai_pages.content import (
    ContentItem,
    RemoteFetchError,
    WordPressClient,
    normalize_tags,
)

if typ.TYPE_CHECKING:
    from conftest import FakeSession

API_URL = "https://wordpress.example/wp-json/wp/v2"
PAGES_URL = f"{API_URL}/pages"


def _pages(count: int, start: int = 0) -> list[dict[str, typ.Any]]:
    return [{"id": start + i, "slug": f"page-{start + i}"} for i in range(count)]


@pytest.fixture
def client(fake_session: FakeSession) -> WordPressClient:
    return WordPressClient(
        f"{API_URL}/", session=fake_session, timeout=5.0, page_size=3
    )


def test_collection_concatenates_pages_until_short_page(
    client: WordPressClient, fake_session: FakeSession
) -> None:
    fake_session.pages(PAGES_URL, [_pages(3), _pages(3, 3), _pages(1, 6)])

    items = client.fetch_collection("pages")

    assert [item["slug"] for item in items] == [f"page-{i}" for i in range(7)], (
        "expected every item from every page in listing order"
    )
    pages_requested = [params["page"] for _url, params in fake_session.calls]
    assert pages_requested == [1, 2, 3], (
        f"expected paging to stop after the short page, got {pages_requested!r}"
    )
    assert all(params["per_page"] == 3 for _url, params in fake_session.calls)


def test_collection_stops_on_empty_page(
    client: WordPressClient, fake_session: FakeSession
) -> None:
    fake_session.pages(PAGES_URL, [_pages(3), []])

    items = client.fetch_collection("pages")

    assert len(items) == 3, f"expected 3 items, got {len(items)}"
    assert len(fake_session.calls) == 2, "expected an empty page to end paging"


def test_collection_of_exact_multiple_requests_trailing_empty_page(
    client: WordPressClient, fake_session: FakeSession
) -> None:
    fake_session.pages(PAGES_URL, [_pages(3), _pages(3, 3)])

    items = client.fetch_collection("pages")

    assert len(items) == 6, f"expected 6 items, got {len(items)}"
    assert len(fake_session.calls) == 3, (
        "expected one extra request to observe the empty page"
    )


def test_collection_stops_on_non_list_payload(
    client: WordPressClient, fake_session: FakeSession
) -> None:
    fake_session.json(PAGES_URL, {"code": "rest_no_route"})

    assert client.fetch_collection("pages") == []


def test_error_status_raises_remote_fetch_error(
    client: WordPressClient, fake_session: FakeSession
) -> None:
    fake_session.fail(f"{API_URL}/frontpage", 503)

    with pytest.raises(RemoteFetchError) as excinfo:
        client.fetch_front_page()

    assert excinfo.value.status == 503, f"unexpected status {excinfo.value.status!r}"
    assert excinfo.value.endpoint == "frontpage"
    assert "503" in str(excinfo.value)


def test_transport_failure_raises_remote_fetch_error(
    client: WordPressClient, fake_session: FakeSession
) -> None:
    fake_session.error(PAGES_URL, requests.ConnectionError("connection refused"))

    with pytest.raises(RemoteFetchError) as excinfo:
        client.fetch_collection("pages")

    assert excinfo.value.status is None
    assert "connection refused" in str(excinfo.value)


def test_invalid_json_raises_remote_fetch_error(
    client: WordPressClient, fake_session: FakeSession
) -> None:
    fake_session.json(f"{API_URL}/frontpage", None)

    with pytest.raises(RemoteFetchError, match="not valid JSON"):
        client.fetch_front_page()


def test_front_page_must_be_an_object(
    client: WordPressClient, fake_session: FakeSession
) -> None:
    fake_session.json(f"{API_URL}/frontpage", [{"id": 1}])

    with pytest.raises(RemoteFetchError, match="expected a JSON object"):
        client.fetch_front_page()


def test_fetch_dispatches_on_endpoint(
    client: WordPressClient, fake_session: FakeSession
) -> None:
    fake_session.json(f"{API_URL}/frontpage", {"id": 1, "slug": "home"})
    fake_session.pages(PAGES_URL, [_pages(2)])

    front = client.fetch("frontpage")
    pages = client.fetch("pages")

    assert isinstance(front, dict), "expected the front page as a single object"
    assert isinstance(pages, list), "expected the listing as a list"
    assert fake_session.calls[0] == (f"{API_URL}/frontpage", {})


def test_page_size_must_be_positive(fake_session: FakeSession) -> None:
    with pytest.raises(ValueError, match="page_size"):
        WordPressClient(API_URL, session=fake_session, page_size=0)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (["page", "category-oefening"], ("page", "category-oefening")),
        ({"0": "page", "1": "category-lilia"}, ("page", "category-lilia")),
        (
            "page  type-page,category-oefening",
            ("page", "type-page", "category-oefening"),
        ),
        (["page", "page", " "], ("page",)),
        (None, ()),
        (42, ()),
    ],
)
def test_normalize_tags(raw: object, expected: tuple[str, ...]) -> None:
    assert normalize_tags(raw) == expected


def test_content_item_from_payload() -> None:
    item = ContentItem.from_payload(
        {
            "id": "12",
            "slug": "opdracht-1",
            "title": {"rendered": "Opdracht &#8211; een"},
            "content": {"rendered": "<p>Body</p>"},
            "class_list": {"0": "page", "1": "category-oefening"},
            "featured_media": 0,
        }
    )

    assert item.id == 12
    assert item.title == "Opdracht &#8211; een", "title stays entity-encoded"
    assert item.body == "<p>Body</p>"
    assert item.tags == ("page", "category-oefening")
    assert item.media_id is None, "featured_media 0 means no image"


def test_content_item_tolerates_missing_fields() -> None:
    item = ContentItem.from_payload({"id": 3})

    assert item.slug == ""
    assert item.title == ""
    assert item.body == ""
    assert item.tags == ()
