r"""Utilities for reading pages from the WordPress REST API.

This module wraps the portions of the WordPress REST API needed to build the
static site: the singular ``frontpage`` resource and the paginated ``pages``
collection. It exposes a client that pages through collections until a short
page signals exhaustion, surfaces HTTP failures as :class:`RemoteFetchError`,
and normalises raw payloads into immutable :class:`ContentItem` records.

Example
-------
>>> from aiaiai_pages.content import WordPressClient
>>> client = WordPressClient("https://cms.example/wp-json/wp/v2")  # doctest: +SKIP
>>> pages = client.fetch_collection("pages")  # doctest: +SKIP
>>> pages[0].slug  # doctest: +SKIP
'opdracht-1'
"""

from __future__ import annotations

import dataclasses as dc
import json
import re
import typing as typ
from http import HTTPStatus

import requests

from ._constants import DEFAULT_PAGE_SIZE, DEFAULT_TIMEOUT, FRONT_PAGE_ENDPOINT

_TAG_SPLIT = re.compile(r"[\s,]+")


class RemoteFetchError(RuntimeError):
    """Raised when the content API cannot be reached or answers with an error.

    Attributes
    ----------
    status : int | None
        HTTP status code, or ``None`` when the request never completed.
    endpoint : str
        Endpoint name (``frontpage``, ``pages``, ``media/42``) being fetched.
    """

    def __init__(self, endpoint: str, status: int | None, detail: str = "") -> None:
        self.endpoint = endpoint
        self.status = status
        label = f"status {status}" if status is not None else "no response"
        message = f"WP API {label} when fetching {endpoint}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


def normalize_tags(value: object) -> tuple[str, ...]:
    """Return classification tags as an ordered tuple of unique strings.

    WordPress reports ``class_list`` as a JSON array, but plugins and older
    endpoints hand back objects keyed by index or a single delimited string.
    Every shape collapses to the same canonical tuple here so downstream code
    never inspects the raw payload.

    Examples
    --------
    >>> normalize_tags(["category-oefening", "category-lilia"])
    ('category-oefening', 'category-lilia')
    >>> normalize_tags("page type-page, category-oefening")
    ('page', 'type-page', 'category-oefening')
    >>> normalize_tags({"0": "page", "1": "page"})
    ('page',)
    """
    match value:
        case None:
            raw: list[object] = []
        case str():
            raw = list(_TAG_SPLIT.split(value))
        case dict():
            raw = list(value.values())
        case list() | tuple():
            raw = list(value)
        case _:
            raw = []

    tags: list[str] = []
    for item in raw:
        if item is None:
            continue
        text = str(item).strip()
        if text and text not in tags:
            tags.append(text)
    return tuple(tags)


def _rendered(value: object) -> str:
    """Return the ``rendered`` member of a WordPress field or the plain value."""
    if isinstance(value, dict):
        value = value.get("rendered")
    if value is None:
        return ""
    return str(value)


def _optional_int(value: object) -> int | None:
    """Return ``value`` as an int, or None when it cannot be coerced."""
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


@dc.dataclass(slots=True, frozen=True)
class ContentItem:
    """A single WordPress page as consumed by the build.

    Attributes
    ----------
    id : int | None
        WordPress post identifier.
    slug : str
        URL-safe page name; becomes the output filename.
    title : str
        Rendered title, still entity-encoded.
    body : str
        Rendered HTML body fragment.
    tags : tuple[str, ...]
        Canonical ordered classification tags (``class_list``).
    media_id : int | None
        Featured media reference, ``None`` when the page has none.
    """

    id: int | None
    slug: str
    title: str = ""
    body: str = ""
    tags: tuple[str, ...] = ()
    media_id: int | None = None

    @classmethod
    def from_payload(cls, payload: typ.Mapping[str, typ.Any]) -> ContentItem:
        """Build a ContentItem from a raw WordPress page payload."""
        return cls(
            id=_optional_int(payload.get("id")),
            slug=str(payload.get("slug") or ""),
            title=_rendered(payload.get("title")),
            body=_rendered(payload.get("content")),
            tags=normalize_tags(payload.get("class_list")),
            media_id=_optional_int(payload.get("featured_media")) or None,
        )


class WordPressClient:
    """Thin wrapper around the WordPress REST endpoints used by the build.

    The client issues one request at a time and never retries: any non-success
    status becomes a :class:`RemoteFetchError` and is left for the caller to
    decide whether the build can continue.
    """

    def __init__(
        self,
        api_url: str,
        *,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        """Initialise the client with the API base URL and transport.

        Parameters
        ----------
        api_url : str
            Base URL of the REST API, e.g. ``https://cms.example/wp-json/wp/v2``.
        session : requests.Session, optional
            Preconfigured session to reuse connections. Defaults to a new
            session per client.
        timeout : float, optional
            Per-request timeout in seconds. Defaults to ``DEFAULT_TIMEOUT``.
        page_size : int, optional
            ``per_page`` value sent with collection requests.
        """
        if page_size < 1:
            msg = "page_size must be a positive integer"
            raise ValueError(msg)
        self.api_url = api_url.rstrip("/")
        self._session = session or requests.Session()
        self.timeout = timeout
        self.page_size = page_size

    @property
    def session(self) -> requests.Session:
        """Return the HTTP session shared with media downloads."""
        return self._session

    def fetch(
        self, endpoint: str
    ) -> typ.Mapping[str, typ.Any] | list[typ.Mapping[str, typ.Any]]:
        """Return the single front page object or a full collection listing."""
        if endpoint == FRONT_PAGE_ENDPOINT:
            return self.fetch_front_page()
        return self.fetch_collection(endpoint)

    def fetch_front_page(self) -> typ.Mapping[str, typ.Any]:
        """Return the raw payload of the front page resource."""
        payload = self.get_json(FRONT_PAGE_ENDPOINT)
        if not isinstance(payload, dict):
            msg = "expected a JSON object"
            raise RemoteFetchError(FRONT_PAGE_ENDPOINT, HTTPStatus.OK, msg)
        return payload

    def fetch_collection(self, endpoint: str) -> list[typ.Mapping[str, typ.Any]]:
        """Return every item of a paginated collection in listing order.

        Pages are requested with ``per_page`` fixed to :attr:`page_size` and
        ``page`` counting up from 1. Paging stops at the first page holding
        fewer items than the page size, including an empty page or a payload
        that is not a JSON array.
        """
        items: list[typ.Mapping[str, typ.Any]] = []
        page = 1
        while True:
            data = self.get_json(
                endpoint, params={"per_page": self.page_size, "page": page}
            )
            if not isinstance(data, list) or not data:
                break
            items.extend(data)
            if len(data) < self.page_size:
                break
            page += 1
        return items

    def get_json(
        self, endpoint: str, *, params: typ.Mapping[str, typ.Any] | None = None
    ) -> typ.Any:
        """GET ``endpoint`` relative to the API root and decode the JSON body."""
        url = f"{self.api_url}/{endpoint.lstrip('/')}"
        try:
            response = self._session.get(
                url, params=dict(params or {}), timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise RemoteFetchError(endpoint, None, str(exc)) from exc

        if response.status_code >= HTTPStatus.BAD_REQUEST:
            raise RemoteFetchError(endpoint, response.status_code)

        try:
            return response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            raise RemoteFetchError(
                endpoint, response.status_code, "response was not valid JSON"
            ) from exc


__all__ = ["ContentItem", "RemoteFetchError", "WordPressClient", "normalize_tags"]
