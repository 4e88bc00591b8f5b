"""Responsive ``<figure>`` markup for featured images."""

from __future__ import annotations

import dataclasses as dc
import posixpath
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from aiaiai_pages._constants import MEDIA_PATH_PARTS

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from aiaiai_pages.media import MediaAsset, Variant

HERO_SIZES = "(max-width: 768px) 100vw, (max-width: 1200px) 80vw, 1200px"
GRID_SIZES = "(max-width: 35rem) 100vw, (max-width: 55rem) 50vw, 33vw"
HERO_DEFAULT_SIZE = "medium"
GRID_DEFAULT_SIZE = "thumbnail"
GRID_SIZE_LABELS = ("thumbnail", "medium", "medium_large")


@dc.dataclass(slots=True, frozen=True)
class ImagePresentation:
    """Loading and layout settings for one way of showing an image."""

    css_class: str
    sizes: str
    loading: str
    default_size: str
    allowed_sizes: tuple[str, ...] | None = None


HERO = ImagePresentation(
    css_class="hero-image",
    sizes=HERO_SIZES,
    loading="eager",
    default_size=HERO_DEFAULT_SIZE,
)
GRID = ImagePresentation(
    css_class="grid-image",
    sizes=GRID_SIZES,
    loading="lazy",
    default_size=GRID_DEFAULT_SIZE,
    allowed_sizes=GRID_SIZE_LABELS,
)


def dimensioned_variants(
    variants: cabc.Iterable[Variant],
    allowed_sizes: cabc.Collection[str] | None = None,
) -> list[Variant]:
    """Return variants with known width and height, narrowest first."""
    selected = [
        variant
        for variant in variants
        if variant.has_dimensions
        and (allowed_sizes is None or variant.size in allowed_sizes)
    ]
    return sorted(selected, key=lambda variant: variant.width or 0)


def media_base_path(asset: MediaAsset) -> str:
    """Return the site-relative folder holding ``asset`` variants."""
    return "./" + posixpath.join(*MEDIA_PATH_PARTS, asset.slug)


def build_srcset(variants: cabc.Iterable[Variant], base_path: str) -> str:
    """Return a ``srcset`` value listing each variant with its width descriptor.

    Examples
    --------
    >>> from aiaiai_pages.media import Variant
    >>> build_srcset([Variant("u", "thumbnail.jpg", "thumbnail", 150, 150)], "./a")
    './a/thumbnail.jpg 150w'
    """
    return ", ".join(
        f"{base_path}/{variant.filename} {variant.width}w" for variant in variants
    )


class ResponsiveImageRenderer:
    """Render hero and grid figures from a MediaAsset."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        default_templates = Path(__file__).resolve().parents[1] / "templates"
        self.templates_dir = templates_dir or default_templates
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template("figure.jinja")

    def hero(self, asset: MediaAsset | None) -> str:
        """Return eager-loading hero markup, or ``""`` when nothing qualifies."""
        if asset is None:
            return ""
        variants = dimensioned_variants(asset.variants)
        return self._render(asset, variants, HERO, with_srcset=True)

    def grid(self, asset: MediaAsset | None) -> str:
        """Return lazy-loading grid markup restricted to the grid size labels.

        When no grid-sized variant has dimensions, the smallest dimensioned
        variant of any size is shown on its own, without a ``srcset``.
        """
        if asset is None:
            return ""
        variants = dimensioned_variants(asset.variants, GRID.allowed_sizes)
        if variants:
            return self._render(asset, variants, GRID, with_srcset=True)
        fallback = dimensioned_variants(asset.variants)
        return self._render(asset, fallback[:1], GRID, with_srcset=False)

    def _render(
        self,
        asset: MediaAsset,
        variants: list[Variant],
        presentation: ImagePresentation,
        *,
        with_srcset: bool,
    ) -> str:
        if not variants:
            return ""
        default = next(
            (v for v in variants if v.size == presentation.default_size), variants[0]
        )
        base_path = media_base_path(asset)
        return self.template.render(
            presentation=presentation,
            src=f"{base_path}/{default.filename}",
            srcset=build_srcset(variants, base_path) if with_srcset else None,
            alt=asset.alt_text,
            width=default.width,
            height=default.height,
        )


__all__ = [
    "GRID",
    "GRID_SIZE_LABELS",
    "HERO",
    "ImagePresentation",
    "ResponsiveImageRenderer",
    "build_srcset",
    "dimensioned_variants",
    "media_base_path",
]
