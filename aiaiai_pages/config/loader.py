"""Resolve build configuration from the environment and ``site.yaml``."""

from __future__ import annotations

import os
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from aiaiai_pages._constants import DEFAULT_TIMEOUT

from .helpers import _build_site_settings, _optional_str
from .models import BuildConfig, BuildConfigError, SiteSettings

DEFAULT_SITE_CONFIG = Path("config/site.yaml")
API_URL_ENV = "WP_API_URL"
BUILD_DIR_ENV = "BUILD_DIR"
TEMPLATES_DIR_ENV = "TEMPLATES_DIR"
STATIC_DIR_ENV = "STATIC_DIR"


def load_site_settings(path: Path | None) -> SiteSettings:
    """Load presentation settings from ``path``, falling back to defaults.

    Parameters
    ----------
    path : Path or None
        Location of the optional ``site.yaml`` file. A missing file is not an
        error: the build simply uses :class:`SiteSettings` defaults.

    Returns
    -------
    SiteSettings
        Parsed settings merged over the defaults.

    Raises
    ------
    TypeError
        If the YAML document is not a mapping.
    YAMLError
        If the YAML content cannot be parsed.
    """
    if path is None or not path.exists():
        return SiteSettings()

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = f"Top-level YAML structure in '{path}' must be a mapping."
        raise TypeError(msg)
    return _build_site_settings(loaded)


def load_build_config(
    *,
    api_url: str | None = None,
    build_dir: Path | None = None,
    templates_dir: Path | None = None,
    static_dir: Path | None = None,
    site_config: Path | None = DEFAULT_SITE_CONFIG,
    timeout: float = DEFAULT_TIMEOUT,
    env: typ.Mapping[str, str] | None = None,
) -> BuildConfig:
    """Merge explicit arguments, environment variables, and ``site.yaml``.

    Explicit arguments win over the environment; the environment wins over the
    built-in defaults. The API URL has no default.

    Raises
    ------
    BuildConfigError
        If no API URL is available from either the arguments or ``env``.

    Examples
    --------
    >>> config = load_build_config(
    ...     api_url="https://cms.example/wp-json/wp/v2", site_config=None, env={}
    ... )
    >>> config.build_dir
    PosixPath('build')
    """
    environ = os.environ if env is None else env
    resolved_api = _optional_str(api_url) or _optional_str(environ.get(API_URL_ENV))
    if not resolved_api:
        msg = f"The {API_URL_ENV} environment variable must be set to build the site."
        raise BuildConfigError(msg)

    return BuildConfig(
        api_url=resolved_api.rstrip("/"),
        build_dir=build_dir or Path(environ.get(BUILD_DIR_ENV) or "build"),
        templates_dir=templates_dir
        or Path(environ.get(TEMPLATES_DIR_ENV) or "static/templates"),
        static_dir=static_dir or Path(environ.get(STATIC_DIR_ENV) or "static"),
        site=load_site_settings(site_config),
        timeout=timeout,
    )


__all__ = [
    "API_URL_ENV",
    "BUILD_DIR_ENV",
    "DEFAULT_SITE_CONFIG",
    "STATIC_DIR_ENV",
    "TEMPLATES_DIR_ENV",
    "load_build_config",
    "load_site_settings",
]
