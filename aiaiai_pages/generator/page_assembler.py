"""Stitch CMS content into HTML templates.

:class:`PageAssembler` takes a template file and a :class:`ContentItem` and
produces the final HTML document for one page. It rewrites CMS links so the
output is host-agnostic, fills in the page titles, applies the accent color
and layout moves for assignment pages, adds featured imagery, and on the
front page decorates assignment links with grid images.

Example
-------
>>> from pathlib import Path
>>> from aiaiai_pages.config import SiteSettings
>>> from aiaiai_pages.content import ContentItem
>>> assembler = PageAssembler(SiteSettings())
>>> item = ContentItem(id=7, slug="over", title="Over &amp; uit", body="<p>Hi</p>")
>>> page = assembler.assemble(
...     Path("static/templates/template.html"), item, Path("build/over.html")
... )  # doctest: +SKIP
>>> page.title  # doctest: +SKIP
'Over & uit'
"""

from __future__ import annotations

import re
import typing as typ

from bs4 import BeautifulSoup, Tag

from aiaiai_pages._constants import FRONT_PAGE_NAME
from aiaiai_pages.generator.images import ResponsiveImageRenderer
from aiaiai_pages.generator.models import AssignmentCard, RenderedPage
from aiaiai_pages.generator.text import (
    ContentUrlRewriter,
    capitalize_first,
    decode_entities,
)
from aiaiai_pages.template_selector import is_assignment, select_accent_color

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from bs4.element import PageElement

    from aiaiai_pages.config import SiteSettings
    from aiaiai_pages.content import ContentItem
    from aiaiai_pages.media import MediaAsset

HERO_SELECTOR = ".section--content__block--hero"
INTRO_SELECTOR = ".section--content__block--intro"
CONTENT_SELECTOR = ".wp-content"
CONTENT_MARKER = "content"
ASSIGNMENT_BLOCK_SELECTOR = ".wp-block-group.assignment"
LIST_ITEM_SELECTOR = "li.wp-block-pages-list__item"
LIST_LINK_SELECTOR = "a.wp-block-pages-list__item__link"
SLUG_FROM_HREF = re.compile(r"^\./([^.]+)(?:\.html)?$")
DEFAULT_TITLE = "No title"


def accent_style(color: str) -> str:
    """Return the custom-property declarations for accent ``color``."""
    return (
        f"--assignment-color: var(--{color}); "
        f"--assignment-color-l: var(--{color}-l); "
        f"--assignment-color-d: var(--{color}-d);"
    )


def apply_accent(tag: Tag, color: str) -> None:
    """Append accent custom properties to ``tag`` style and set ``data-color``."""
    previous = str(tag.get("style") or "")
    separator = ""
    if previous:
        separator = " " if previous.rstrip().endswith(";") else "; "
    tag["style"] = f"{previous}{separator}{accent_style(color)}"
    tag["data-color"] = color


def _fragment_nodes(html: str) -> list[PageElement]:
    """Parse ``html`` and return its top-level nodes, detached."""
    fragment = BeautifulSoup(html, "html.parser")
    return [node.extract() for node in list(fragment.contents)]


def _set_inner_html(tag: Tag, html: str) -> None:
    tag.clear()
    for node in _fragment_nodes(html):
        tag.append(node)


def _prepend_html(tag: Tag, html: str) -> None:
    for index, node in enumerate(_fragment_nodes(html)):
        tag.insert(index, node)


class PageAssembler:
    """Render CMS content into a template and write the resulting page."""

    def __init__(
        self,
        site: SiteSettings,
        *,
        image_renderer: ResponsiveImageRenderer | None = None,
    ) -> None:
        self.site = site
        self.rewriter = ContentUrlRewriter(site.content_host, site.content_root)
        self.images = image_renderer or ResponsiveImageRenderer()

    def assemble(
        self,
        template_path: Path,
        item: ContentItem,
        output_path: Path,
        *,
        media: MediaAsset | None = None,
        assignments: cabc.Mapping[str, AssignmentCard] | None = None,
        front_page: bool = False,
    ) -> RenderedPage:
        """Render ``item`` into ``template_path`` and write ``output_path``.

        Parameters
        ----------
        template_path : Path
            HTML template chosen by the TemplateSelector.
        item : ContentItem
            Page content as fetched from the API.
        output_path : Path
            File that receives the rendered HTML.
        media : MediaAsset, optional
            Featured image shown in the hero region.
        assignments : Mapping[str, AssignmentCard], optional
            Assignment slug to card; used to decorate front page links.
        front_page : bool, optional
            Use the fixed site heading and document title.

        Returns
        -------
        RenderedPage
            Summary of what was written.

        Raises
        ------
        OSError
            If the template cannot be read or the output cannot be written.
        """
        doc = BeautifulSoup(template_path.read_text(encoding="utf-8"), "html.parser")
        content = BeautifulSoup(self.rewriter.rewrite(item.body), "html.parser")
        assignment = is_assignment(item.tags, self.site.assignment_tag)

        title = self._apply_titles(doc, item, front_page=front_page)

        color = None
        if assignment:
            color = select_accent_color(
                item.tags,
                reserved=self.site.reserved_categories,
                default=self.site.default_color,
            )
            if doc.body is not None:
                apply_accent(doc.body, color)

        hero_image = None
        hero_html = self.images.hero(media)
        hero = doc.select_one(HERO_SELECTOR)
        if hero_html and hero is not None and media is not None:
            hero.extend(_fragment_nodes(hero_html))
            hero_image = media.slug

        grid_images: list[str] = []
        regions = [
            region
            for region in doc.select(CONTENT_SELECTOR)
            if region.get("data-wp-content") == CONTENT_MARKER
        ]
        if regions and item.body:
            assignment_block = None
            if assignment:
                self._move_intro(doc, content)
                assignment_block = content.select_one(ASSIGNMENT_BLOCK_SELECTOR)
                if assignment_block is not None:
                    assignment_block.extract()
            if front_page and assignments is not None:
                grid_images = self._decorate_assignment_links(content, assignments)
            body_html = str(content)
            for region in regions:
                _set_inner_html(region, body_html)
            if assignment_block is not None:
                regions[-1].insert_after(assignment_block)

        html = str(doc)
        if not html.endswith("\n"):
            html += "\n"
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(html, encoding="utf-8")
        return RenderedPage(
            slug=FRONT_PAGE_NAME if front_page else item.slug,
            output_path=output_path,
            title=title,
            template=template_path,
            accent_color=color,
            hero_image=hero_image,
            grid_images=tuple(grid_images),
        )

    def _apply_titles(
        self, doc: BeautifulSoup, item: ContentItem, *, front_page: bool
    ) -> str:
        """Set the hero ``h1`` and ``<title>``; return the visible title."""
        heading = doc.select_one(f"{HERO_SELECTOR} h1")
        if front_page:
            if heading is not None:
                _set_inner_html(heading, self.site.site_heading_html)
            if doc.title is not None:
                doc.title.string = self.site.site_title
            return self.site.site_title

        title = capitalize_first(decode_entities(item.title) or DEFAULT_TITLE)
        if heading is not None:
            heading.string = title
        if doc.title is not None:
            doc.title.string = f"{title} | {self.site.title_suffix}"
        return title

    @staticmethod
    def _move_intro(doc: BeautifulSoup, content: BeautifulSoup) -> None:
        """Move the first paragraph of ``content`` into the intro region."""
        first_paragraph = content.find("p")
        intro = doc.select_one(INTRO_SELECTOR)
        if first_paragraph is None or intro is None:
            return
        intro.clear()
        intro.append(first_paragraph.extract())

    def _decorate_assignment_links(
        self,
        content: BeautifulSoup,
        assignments: cabc.Mapping[str, AssignmentCard],
    ) -> list[str]:
        """Wrap link labels and add grid imagery plus accent color per assignment."""
        decorated: list[str] = []
        for list_item in content.select(LIST_ITEM_SELECTOR):
            link = list_item.select_one(LIST_LINK_SELECTOR)
            if link is None:
                continue
            label = link.get_text().strip()
            link.clear()
            paragraph = content.new_tag("p")
            paragraph.string = label
            link.append(paragraph)

            match = SLUG_FROM_HREF.match(str(link.get("href") or ""))
            card = assignments.get(match.group(1)) if match else None
            if card is None:
                continue
            grid_html = self.images.grid(card.media)
            if grid_html:
                _prepend_html(link, grid_html)
                decorated.append(card.slug)
            apply_accent(link, card.color)
        return decorated


__all__ = ["PageAssembler", "accent_style", "apply_accent"]
