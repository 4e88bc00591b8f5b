"""Assignment manifest consumed by the print flow.

The manifest is a JSON array of ``{"slug", "path", "featured_image"}``
objects, one per assignment page, in the order the build processed them. It
lives at ``assets/json/assignments.json`` inside the build directory.
"""

from __future__ import annotations

import dataclasses as dc
import json
import logging
import typing as typ
from pathlib import Path

from ._constants import MANIFEST_PATH_PARTS, PAGE_FILENAME_TEMPLATE

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = logging.getLogger(__name__)


class ManifestError(ValueError):
    """Raised when a manifest document cannot be parsed."""


@dc.dataclass(slots=True, frozen=True)
class AssignmentSummary:
    """One manifest entry."""

    slug: str
    path: str
    featured_image: str | None = None

    @classmethod
    def for_page(cls, slug: str, featured_image: str | None) -> AssignmentSummary:
        """Return the entry for an assignment page written as ``<slug>.html``."""
        filename = PAGE_FILENAME_TEMPLATE.format(slug=slug)
        return cls(slug=slug, path=f"./{filename}", featured_image=featured_image)


def manifest_path(build_dir: Path) -> Path:
    """Return the manifest location inside ``build_dir``."""
    return build_dir.joinpath(*MANIFEST_PATH_PARTS)


def dump_manifest(entries: cabc.Iterable[AssignmentSummary]) -> str:
    """Serialize ``entries`` into the manifest JSON text."""
    return json.dumps([dc.asdict(entry) for entry in entries], indent=2)


def load_manifest(text: str) -> list[AssignmentSummary]:
    """Parse manifest JSON text back into summaries.

    Raises
    ------
    ManifestError
        If the text is not JSON or any entry lacks a slug.
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        msg = "Assignment manifest is not valid JSON"
        raise ManifestError(msg) from exc
    if not isinstance(payload, list):
        msg = "Assignment manifest must be a JSON array"
        raise ManifestError(msg)

    entries: list[AssignmentSummary] = []
    for raw in payload:
        if not isinstance(raw, dict) or not raw.get("slug"):
            msg = f"Manifest entry without a slug: {raw!r}"
            raise ManifestError(msg)
        slug = str(raw["slug"])
        default_path = f"./{PAGE_FILENAME_TEMPLATE.format(slug=slug)}"
        entries.append(
            AssignmentSummary(
                slug=slug,
                path=str(raw.get("path") or default_path),
                featured_image=raw.get("featured_image"),
            )
        )
    return entries


class ManifestWriter:
    """Write the assignment manifest once all pages have been assembled."""

    def __init__(self, build_dir: Path) -> None:
        self.path = manifest_path(build_dir)

    def write(self, entries: cabc.Sequence[AssignmentSummary]) -> Path | None:
        """Persist ``entries``; log and return None when the write fails."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(dump_manifest(entries), encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to write assignments manifest %s: %s", self.path, exc)
            return None
        logger.info(
            "Wrote assignments manifest: %s (%d items)", self.path, len(entries)
        )
        return self.path


__all__ = [
    "AssignmentSummary",
    "ManifestError",
    "ManifestWriter",
    "dump_manifest",
    "load_manifest",
    "manifest_path",
]
