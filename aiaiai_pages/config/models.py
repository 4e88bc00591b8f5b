"""Typed dataclasses describing aiaiai site build configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from aiaiai_pages._constants import DEFAULT_TIMEOUT


class BuildConfigError(ValueError):
    """Raised when the build configuration is invalid or incomplete."""


@dc.dataclass(slots=True, frozen=True)
class SiteSettings:
    """Presentation values applied to every generated page."""

    site_heading_html: str = "<span>AI,</span><span>AI,</span><span>AI</span>"
    site_title: str = "AIAIAI | Lectoraat Responsible IT"
    title_suffix: str = "Lectoraat Responsible IT"
    content_host: str = "aiaiai.art"
    content_root: str = "homepage"
    assignment_category: str = "oefening"
    reserved_categories: tuple[str, ...] = ("oefening", "inspired-by", "made-by")
    default_color: str = "lilia"
    print_stylesheets: tuple[str, ...] = ("./styles/print.css",)

    @property
    def assignment_tag(self) -> str:
        """Return the classification tag that marks assignment pages."""
        return f"category-{self.assignment_category}"


@dc.dataclass(slots=True, frozen=True)
class BuildConfig:
    """Resolved locations and settings for a single site build.

    Attributes
    ----------
    api_url : str
        Base URL of the WordPress REST API (``.../wp-json/wp/v2``).
    build_dir : Path
        Directory that receives the generated site.
    templates_dir : Path
        Directory holding the HTML page templates.
    static_dir : Path
        Directory whose styles, scripts, images and fonts are copied verbatim.
    site : SiteSettings
        Presentation values loaded from ``config/site.yaml`` or defaults.
    timeout : float
        Per-request timeout, in seconds, for every API and media call.
    """

    api_url: str
    build_dir: Path = Path("build")
    templates_dir: Path = Path("static/templates")
    static_dir: Path = Path("static")
    site: SiteSettings = dc.field(default_factory=SiteSettings)
    timeout: float = DEFAULT_TIMEOUT


__all__ = ["BuildConfig", "BuildConfigError", "SiteSettings"]
