"""Shared dataclasses used by the page assembly pipeline."""

from __future__ import annotations

import dataclasses as dc
import enum
from pathlib import Path

from aiaiai_pages.media import MediaAsset


@dc.dataclass(slots=True, frozen=True)
class RenderedPage:
    """Outcome of assembling one content item against a template.

    Attributes
    ----------
    slug : str
        Page slug, or ``"index"`` for the front page.
    output_path : Path
        HTML file written to the build directory.
    title : str
        Final visible title text.
    template : Path
        Template the page was assembled from.
    accent_color : str | None
        Color token for assignment pages; ``None`` otherwise.
    hero_image : str | None
        Slug of the media asset rendered in the hero region.
    grid_images : tuple[str, ...]
        Assignment slugs whose grid imagery was injected (front page only).
    """

    slug: str
    output_path: Path
    title: str
    template: Path
    accent_color: str | None = None
    hero_image: str | None = None
    grid_images: tuple[str, ...] = ()


@dc.dataclass(slots=True, frozen=True)
class AssignmentCard:
    """What the front page needs to decorate a link to an assignment."""

    slug: str
    color: str
    media: MediaAsset | None = None


class PageStatus(enum.StrEnum):
    """Result of processing a single page."""

    WRITTEN = "written"
    SKIPPED = "skipped"


@dc.dataclass(slots=True, frozen=True)
class PageResult:
    """Per-page entry of the build report."""

    slug: str
    status: PageStatus
    page: RenderedPage | None = None
    reason: str | None = None


@dc.dataclass(slots=True)
class BuildReport:
    """Structured summary of a site build.

    Attributes
    ----------
    results : list[PageResult]
        One entry per processed page, in processing order; the front page
        comes last.
    manifest_path : Path | None
        Location of the assignments manifest, ``None`` if writing failed.
    """

    results: list[PageResult] = dc.field(default_factory=list)
    manifest_path: Path | None = None

    @property
    def written(self) -> list[RenderedPage]:
        """Return the rendered pages that reached disk."""
        return [r.page for r in self.results if r.page is not None]

    @property
    def skipped(self) -> list[PageResult]:
        """Return the results for pages that were skipped."""
        return [r for r in self.results if r.status is PageStatus.SKIPPED]

    def record_written(self, page: RenderedPage) -> None:
        self.results.append(
            PageResult(slug=page.slug, status=PageStatus.WRITTEN, page=page)
        )

    def record_skipped(self, slug: str, reason: str) -> None:
        self.results.append(
            PageResult(slug=slug, status=PageStatus.SKIPPED, reason=reason)
        )


__all__ = [
    "AssignmentCard",
    "BuildReport",
    "PageResult",
    "PageStatus",
    "RenderedPage",
]
