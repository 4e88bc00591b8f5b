"""Utility helpers shared by the aiaiai configuration loader."""

from __future__ import annotations

import typing as typ

from .models import SiteSettings


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _string_tuple(value: str | list[object] | None) -> tuple[str, ...] | None:
    """Normalize a YAML scalar or sequence into a tuple of non-empty strings."""
    match value:
        case None:
            return None
        case str():
            return tuple(segment for segment in value.split() if segment)
        case list() | tuple():
            items = (str(segment).strip() for segment in value)
            return tuple(item for item in items if item)
        case _:
            return None


def _build_site_settings(payload: typ.Mapping[str, typ.Any]) -> SiteSettings:
    """Build SiteSettings from a YAML mapping, keeping defaults for gaps."""
    base = SiteSettings()
    reserved = _string_tuple(payload.get("reserved_categories"))
    stylesheets = _string_tuple(payload.get("print_stylesheets"))
    return SiteSettings(
        site_heading_html=payload.get("site_heading_html", base.site_heading_html),
        site_title=payload.get("site_title", base.site_title),
        title_suffix=payload.get("title_suffix", base.title_suffix),
        content_host=_optional_str(payload.get("content_host")) or base.content_host,
        content_root=(
            _optional_str(payload.get("content_root")) or base.content_root
        ).strip("/"),
        assignment_category=(
            _optional_str(payload.get("assignment_category"))
            or base.assignment_category
        ),
        reserved_categories=(
            reserved if reserved is not None else base.reserved_categories
        ),
        default_color=(
            _optional_str(payload.get("default_color")) or base.default_color
        ).lower(),
        print_stylesheets=(
            stylesheets if stylesheets is not None else base.print_stylesheets
        ),
    )


__all__ = ["_build_site_settings", "_optional_str", "_string_tuple"]
