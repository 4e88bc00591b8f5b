"""Load and validate build configuration for aiaiai site builds.

This subpackage reads the WordPress API location and output directories from
the environment, merges the optional ``config/site.yaml`` presentation
settings, and produces frozen dataclasses (:class:`BuildConfig`,
:class:`SiteSettings`) that the build pipeline and print flow consume. The
primary entry point is :func:`load_build_config`.

Examples
--------
>>> from aiaiai_pages.config import load_build_config
>>> config = load_build_config(site_config=None)  # doctest: +SKIP
>>> config.api_url  # doctest: +SKIP
'https://wordpress.aiaiai.art/wp-json/wp/v2'
"""

from .loader import load_build_config, load_site_settings
from .models import BuildConfig, BuildConfigError, SiteSettings

__all__ = [
    "BuildConfig",
    "BuildConfigError",
    "SiteSettings",
    "load_build_config",
    "load_site_settings",
]
