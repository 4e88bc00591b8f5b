"""Shared fixtures for the aiaiai_pages test suite.

The fixtures here stand in for the WordPress REST API and for the HTML
templates a site checkout provides. ``fake_session`` is a routed stand-in for
``requests.Session`` that records every call, so tests can assert on the exact
requests the build made without touching the network.
"""

from __future__ import annotations

import typing as typ
from textwrap import dedent

import pytest
import requests

from aiaiai_pages.config import BuildConfig, SiteSettings

if typ.TYPE_CHECKING:
    from pathlib import Path

API_URL = "https://wordpress.example/wp-json/wp/v2"

BASE_TEMPLATE = dedent(
    """
    <!DOCTYPE html>
    <html lang="nl">
      <head><title>placeholder</title></head>
      <body>
        <main id="main">
          <div class="section--content__block--hero"><h1></h1></div>
          <div class="wp-content" data-wp-content="content"></div>
        </main>
      </body>
    </html>
    """
).strip()

ASSIGNMENT_TEMPLATE = dedent(
    """
    <!DOCTYPE html>
    <html lang="nl">
      <head><title>placeholder</title></head>
      <body style="margin: 0">
        <main id="main">
          <div class="section--content__block--hero"><h1></h1></div>
          <div class="section--content__block--intro"></div>
          <div class="wp-content" data-wp-content="content"></div>
        </main>
        <div class="print-all no-print"></div>
      </body>
    </html>
    """
).strip()


class FakeResponse:
    """Minimal ``requests.Response`` replacement."""

    def __init__(
        self,
        payload: object = None,
        *,
        status_code: int = 200,
        content: bytes = b"",
        text: str = "",
    ) -> None:
        self._payload = payload
        self.status_code = status_code
        self.content = content
        self.text = text

    def json(self) -> object:
        if self._payload is None:
            msg = "no JSON body"
            raise ValueError(msg)
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            msg = f"{self.status_code} error"
            raise requests.HTTPError(msg)


class FakeSession:
    """Route ``get`` calls by URL and record them.

    A route is a :class:`FakeResponse`, an exception to raise, or a list of
    JSON pages served according to the ``page`` query parameter. Unknown URLs
    answer with HTTP 404.
    """

    def __init__(self) -> None:
        self.routes: dict[str, object] = {}
        self.calls: list[tuple[str, dict[str, typ.Any]]] = []

    def json(self, url: str, payload: object, *, status_code: int = 200) -> None:
        self.routes[url] = FakeResponse(payload, status_code=status_code)

    def pages(self, url: str, pages: list[list[dict[str, typ.Any]]]) -> None:
        self.routes[url] = pages

    def bytes(self, url: str, content: bytes) -> None:
        self.routes[url] = FakeResponse(content=content)

    def text(self, url: str, text: str) -> None:
        self.routes[url] = FakeResponse(text=text)

    def fail(self, url: str, status_code: int) -> None:
        self.routes[url] = FakeResponse(status_code=status_code)

    def error(self, url: str, exc: Exception) -> None:
        self.routes[url] = exc

    def urls(self) -> list[str]:
        return [url for url, _params in self.calls]

    def get(
        self,
        url: str,
        params: dict[str, typ.Any] | None = None,
        timeout: float | None = None,  # noqa: ARG002
        **_kwargs: typ.Any,
    ) -> FakeResponse:
        params = dict(params or {})
        self.calls.append((url, params))
        route = self.routes.get(url)
        if isinstance(route, Exception):
            raise route
        if isinstance(route, list):
            page = int(params.get("page", 1))
            return FakeResponse(route[page - 1] if page <= len(route) else [])
        if isinstance(route, FakeResponse):
            return route
        return FakeResponse(status_code=404)


@pytest.fixture
def fake_session() -> FakeSession:
    """Return an empty routed session."""
    return FakeSession()


@pytest.fixture
def site_settings() -> SiteSettings:
    """Return site settings whose content host matches the fixture URLs."""
    return SiteSettings(
        site_heading_html="<span>AI,</span><span>AI</span>",
        site_title="Home | Fixture",
        title_suffix="Fixture",
        content_host="example",
        content_root="homepage",
    )


@pytest.fixture
def templates_dir(tmp_path: Path) -> Path:
    """Write the base and assignment templates into a temp folder."""
    path = tmp_path / "templates"
    path.mkdir()
    (path / "template.html").write_text(BASE_TEMPLATE, encoding="utf-8")
    (path / "assignment.html").write_text(ASSIGNMENT_TEMPLATE, encoding="utf-8")
    return path


@pytest.fixture
def build_config(
    tmp_path: Path, templates_dir: Path, site_settings: SiteSettings
) -> BuildConfig:
    """Return a build configuration rooted in the per-test temp folder."""
    return BuildConfig(
        api_url=API_URL,
        build_dir=tmp_path / "build",
        templates_dir=templates_dir,
        static_dir=tmp_path / "static",
        site=site_settings,
        timeout=5.0,
    )
