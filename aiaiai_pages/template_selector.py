"""Template lookup and accent-color selection for generated pages."""

from __future__ import annotations

import logging
import re
import typing as typ
from pathlib import Path

from ._constants import ASSIGNMENT_TEMPLATE, BASE_TEMPLATE

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = logging.getLogger(__name__)

CATEGORY_PATTERN = re.compile(r"^category-(.+)$")


def is_assignment(tags: cabc.Iterable[str], assignment_tag: str) -> bool:
    """Return True when ``assignment_tag`` is among the classification tags."""
    return assignment_tag in tags


def select_accent_color(
    tags: cabc.Iterable[str],
    *,
    reserved: cabc.Collection[str],
    default: str,
) -> str:
    """Return the color token encoded in the first non-reserved category tag.

    Examples
    --------
    >>> select_accent_color(
    ...     ["category-oefening", "category-Lilia", "category-made-by"],
    ...     reserved={"oefening", "inspired-by", "made-by"},
    ...     default="purple",
    ... )
    'lilia'
    >>> select_accent_color(["page"], reserved=(), default="purple")
    'purple'
    """
    for tag in tags:
        match = CATEGORY_PATTERN.match(tag)
        if match and match.group(1).lower() not in reserved:
            return match.group(1).lower()
    return default.lower()


def normalize_page_name(name: str) -> str:
    """Lower-case ``name`` and turn spaces into hyphens for template lookup."""
    return name.lower().replace(" ", "-")


class TemplateSelector:
    """Pick the most specific HTML template available for a page."""

    def __init__(self, templates_dir: Path, *, assignment_tag: str) -> None:
        self.templates_dir = templates_dir
        self.assignment_tag = assignment_tag

    @property
    def base_template(self) -> Path:
        return self.templates_dir / BASE_TEMPLATE

    def select(self, name: str, tags: cabc.Iterable[str]) -> Path:
        """Return the template path for page ``name`` with the given tags.

        Assignment pages prefer the dedicated assignment template; every page
        then tries ``<name>.html`` and finally the base template. A candidate
        that cannot be read is treated as absent. The base template is
        returned without a check: a missing base surfaces when the page is
        assembled.
        """
        if is_assignment(tags, self.assignment_tag):
            candidate = self.templates_dir / ASSIGNMENT_TEMPLATE
            if self._readable(candidate):
                logger.debug("[%s] using category template %s", name, candidate)
                return candidate
            logger.debug("[%s] category template not found, falling back", name)

        specific = self.templates_dir / f"{normalize_page_name(name)}.html"
        if self._readable(specific):
            logger.debug("[%s] using specific template %s", name, specific)
            return specific

        logger.debug("[%s] using base template %s", name, self.base_template)
        return self.base_template

    @staticmethod
    def _readable(path: Path) -> bool:
        try:
            path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return False
        return True


__all__ = [
    "CATEGORY_PATTERN",
    "TemplateSelector",
    "is_assignment",
    "normalize_page_name",
    "select_accent_color",
]
