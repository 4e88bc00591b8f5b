"""High-level orchestration for a full site build.

:class:`SiteBuilder` runs the build pipeline in a fixed, sequential order:

1. clear the build directory and copy static assets;
2. fetch the front page, then the full page listing (either failure aborts);
3. assemble every other page in listing order, downloading featured media
   and collecting assignment summaries as it goes;
4. write the assignment manifest;
5. assemble the front page, decorating its assignment links.

Per-page failures are logged and recorded in the returned
:class:`~aiaiai_pages.generator.models.BuildReport`; they never stop the
remaining pages.

Example
-------
>>> from aiaiai_pages.config import load_build_config
>>> from aiaiai_pages.generator import SiteBuilder
>>> builder = SiteBuilder(load_build_config())  # doctest: +SKIP
>>> report = builder.run()  # doctest: +SKIP
>>> [page.slug for page in report.written][-1]  # doctest: +SKIP
'index'
"""

from __future__ import annotations

import logging
import shutil
import typing as typ

from aiaiai_pages._constants import (
    FRONT_PAGE_NAME,
    MEDIA_PATH_PARTS,
    PAGE_FILENAME_TEMPLATE,
    PAGES_ENDPOINT,
)
from aiaiai_pages.content import ContentItem, RemoteFetchError, WordPressClient
from aiaiai_pages.generator.models import AssignmentCard, BuildReport
from aiaiai_pages.generator.page_assembler import PageAssembler
from aiaiai_pages.manifest import AssignmentSummary, ManifestWriter
from aiaiai_pages.media import MediaAsset, MediaDownloader
from aiaiai_pages.template_selector import TemplateSelector, is_assignment

if typ.TYPE_CHECKING:
    from pathlib import Path

    from aiaiai_pages.config import BuildConfig

logger = logging.getLogger(__name__)

STATIC_DIRECTORIES = ("styles", "scripts", "images", "fonts")
STATIC_FILES = ("404.html",)


def prepare_build_dir(build_dir: Path) -> None:
    """Remove any previous build output and recreate ``build_dir``."""
    if build_dir.exists():
        shutil.rmtree(build_dir)
    build_dir.mkdir(parents=True, exist_ok=True)


def copy_static_assets(static_dir: Path, build_dir: Path) -> list[Path]:
    """Copy the static asset folders and files that exist into ``build_dir``.

    Missing sources are skipped; copy failures are logged.
    """
    copied: list[Path] = []
    for name in (*STATIC_DIRECTORIES, *STATIC_FILES):
        source = static_dir / name
        target = build_dir / name
        if not source.exists():
            continue
        try:
            if source.is_dir():
                shutil.copytree(source, target, dirs_exist_ok=True)
            else:
                shutil.copy2(source, target)
        except OSError as exc:
            logger.error("Error copying static asset %s: %s", source, exc)
            continue
        copied.append(target)
    logger.info("Copied %d static asset entries", len(copied))
    return copied


class SiteBuilder:
    """Fetch CMS content and write the complete static site."""

    def __init__(
        self,
        config: BuildConfig,
        *,
        client: WordPressClient | None = None,
        downloader: MediaDownloader | None = None,
        assembler: PageAssembler | None = None,
    ) -> None:
        """Wire the pipeline components for ``config``.

        Parameters
        ----------
        config : BuildConfig
            Resolved API location, directories, and site settings.
        client : WordPressClient, optional
            Content API client; defaults to one built from ``config``.
        downloader : MediaDownloader, optional
            Media downloader; defaults to one sharing ``client``.
        assembler : PageAssembler, optional
            Page assembler; defaults to one using ``config.site``.
        """
        self.config = config
        self.client = client or WordPressClient(config.api_url, timeout=config.timeout)
        self.downloader = downloader or MediaDownloader(self.client)
        self.selector = TemplateSelector(
            config.templates_dir, assignment_tag=config.site.assignment_tag
        )
        self.assembler = assembler or PageAssembler(config.site)
        self.manifest_writer = ManifestWriter(config.build_dir)

    @property
    def media_root(self) -> Path:
        return self.config.build_dir.joinpath(*MEDIA_PATH_PARTS)

    def run(self, *, clean: bool = True) -> BuildReport:
        """Build the whole site and return a per-page report.

        Parameters
        ----------
        clean : bool, optional
            Clear the build directory and copy static assets first. Defaults
            to ``True``.

        Raises
        ------
        RemoteFetchError
            If the front page or the page listing cannot be fetched.
        """
        if clean:
            prepare_build_dir(self.config.build_dir)
            copy_static_assets(self.config.static_dir, self.config.build_dir)
        else:
            self.config.build_dir.mkdir(parents=True, exist_ok=True)

        front_page = ContentItem.from_payload(self.client.fetch_front_page())
        report = BuildReport()
        listing: list[ContentItem] = []
        payloads = self.client.fetch_collection(PAGES_ENDPOINT)
        for position, payload in enumerate(payloads):
            if not isinstance(payload, dict):
                logger.warning("Skipping malformed listing entry %d", position)
                report.record_skipped(f"#{position}", "malformed listing entry")
                continue
            listing.append(ContentItem.from_payload(payload))

        summaries: list[AssignmentSummary] = []
        cards: dict[str, AssignmentCard] = {}
        for item in listing:
            if front_page.id is not None and item.id == front_page.id:
                continue
            self._build_page(item, report, summaries, cards)

        report.manifest_path = self.manifest_writer.write(summaries)
        self._build_front_page(front_page, cards, report)
        logger.info(
            "Build finished: %d written, %d skipped",
            len(report.written),
            len(report.skipped),
        )
        return report

    def _build_page(
        self,
        item: ContentItem,
        report: BuildReport,
        summaries: list[AssignmentSummary],
        cards: dict[str, AssignmentCard],
    ) -> None:
        if not item.slug:
            logger.warning("Skipping page %s without a slug", item.id)
            report.record_skipped(str(item.id), "missing slug")
            return

        output_path = self.config.build_dir / PAGE_FILENAME_TEMPLATE.format(
            slug=item.slug
        )
        try:
            media = self._collect_media(item)
            template = self.selector.select(item.slug, item.tags)
            page = self.assembler.assemble(template, item, output_path, media=media)
        except Exception as exc:  # noqa: BLE001 - skip the page, keep building
            logger.error("[%s] Error processing page: %s", item.slug, exc)
            report.record_skipped(item.slug, str(exc))
            return

        logger.info("Generated: %s", output_path)
        report.record_written(page)
        if is_assignment(item.tags, self.config.site.assignment_tag):
            summaries.append(
                AssignmentSummary.for_page(item.slug, media.slug if media else None)
            )
            cards[item.slug] = AssignmentCard(
                slug=item.slug,
                color=page.accent_color or self.config.site.default_color,
                media=media,
            )

    def _collect_media(self, item: ContentItem) -> MediaAsset | None:
        if item.media_id is None:
            return None
        logger.info("[%s] Downloading featured image (ID: %s)", item.slug, item.media_id)
        try:
            return self.downloader.collect(item.media_id, self.media_root)
        except RemoteFetchError as exc:
            logger.warning("[%s] Featured image unavailable: %s", item.slug, exc)
            return None

    def _build_front_page(
        self,
        item: ContentItem,
        cards: dict[str, AssignmentCard],
        report: BuildReport,
    ) -> None:
        output_path = self.config.build_dir / PAGE_FILENAME_TEMPLATE.format(
            slug=FRONT_PAGE_NAME
        )
        try:
            template = self.selector.select(FRONT_PAGE_NAME, item.tags)
            page = self.assembler.assemble(
                template, item, output_path, assignments=cards, front_page=True
            )
        except Exception as exc:  # noqa: BLE001 - report the skip like other pages
            logger.error("[%s] Error processing page: %s", FRONT_PAGE_NAME, exc)
            report.record_skipped(FRONT_PAGE_NAME, str(exc))
            return
        logger.info("Generated: %s", output_path)
        report.record_written(page)


__all__ = ["SiteBuilder", "copy_static_assets", "prepare_build_dir"]
