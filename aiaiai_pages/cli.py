"""Cyclopts CLI entrypoint for building and printing the aiaiai site.

The ``pages`` console script defined here renders the static site from the
WordPress REST API and assembles printable bundles of assignment pages from a
finished build. Typical usage involves running ``pages build`` in CI with
``WP_API_URL`` set, and ``pages print`` locally to produce a single document
holding every assignment.

Examples
--------
Build the site into the default ``build`` directory:

>>> from aiaiai_pages.cli import main
>>> main()  # doctest: +SKIP

Print two assignments from an existing build:

>>> from aiaiai_pages.cli import app
>>> app(["print", "opdracht-1", "opdracht-2"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from ._constants import DEFAULT_TIMEOUT
from .config import BuildConfigError, load_build_config, load_site_settings
from .config.loader import DEFAULT_SITE_CONFIG
from .content import RemoteFetchError
from .generator import SiteBuilder
from .printing import (
    ContentAggregator,
    DirectoryPageSource,
    FilePrinter,
    HttpPageSource,
    IsolatedRenderer,
    PageSource,
    PrintController,
    PrintSelection,
)

logger = logging.getLogger("aiaiai_pages.cli")

app = App(name="pages", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


@app.command(help="Build the static site from the WordPress REST API.")
def build(
    *,
    api_url: typ.Annotated[
        str | None, Parameter(help="WordPress REST API base URL", env_var="WP_API_URL")
    ] = None,
    build_dir: typ.Annotated[
        Path | None, Parameter(help="Output folder", env_var="BUILD_DIR")
    ] = None,
    templates_dir: typ.Annotated[
        Path | None, Parameter(help="HTML template folder", env_var="TEMPLATES_DIR")
    ] = None,
    static_dir: typ.Annotated[
        Path | None, Parameter(help="Static asset folder", env_var="STATIC_DIR")
    ] = None,
    site_config: typ.Annotated[
        Path, Parameter(help="Path to site settings", env_var="INPUT_SITE_CONFIG")
    ] = DEFAULT_SITE_CONFIG,
    timeout: typ.Annotated[
        float, Parameter(help="Per-request timeout in seconds")
    ] = DEFAULT_TIMEOUT,
    verbose: typ.Annotated[bool, Parameter(help="Enable debug logging")] = False,
) -> None:
    """Fetch CMS content and write the static site.

    Parameters
    ----------
    api_url : str or None, optional
        WordPress REST API base URL; required, usually supplied through
        ``WP_API_URL``.
    build_dir : Path or None, optional
        Output folder, ``build`` by default (``BUILD_DIR``).
    templates_dir : Path or None, optional
        HTML template folder, ``static/templates`` by default
        (``TEMPLATES_DIR``).
    static_dir : Path or None, optional
        Static asset folder, ``static`` by default (``STATIC_DIR``).
    site_config : Path, optional
        Optional YAML file with presentation settings.
    timeout : float, optional
        Per-request timeout for API and media calls.
    verbose : bool, optional
        Log at DEBUG level.

    Raises
    ------
    SystemExit
        With status 1 when configuration is missing or the front page or page
        listing cannot be fetched.
    """
    _configure_logging(verbose)
    try:
        config = load_build_config(
            api_url=api_url,
            build_dir=build_dir,
            templates_dir=templates_dir,
            static_dir=static_dir,
            site_config=site_config,
            timeout=timeout,
        )
    except BuildConfigError as exc:
        logger.error("ERROR: %s", exc)
        raise SystemExit(1) from exc

    try:
        report = SiteBuilder(config).run()
    except RemoteFetchError as exc:
        logger.error("Build failed: %s", exc)
        raise SystemExit(1) from exc

    for page in report.written:
        print(f"wrote {_format_path(page.output_path)}")
    for result in report.skipped:
        print(f"skipped {result.slug}: {result.reason}")
    if report.manifest_path:
        print(f"wrote {_format_path(report.manifest_path)}")


@app.command(name="print", help="Assemble pages into one printable document.")
def print_pages(
    *slugs: str,
    build_dir: typ.Annotated[
        Path, Parameter(help="Folder holding a finished build", env_var="BUILD_DIR")
    ] = Path("build"),
    base_url: typ.Annotated[
        str | None, Parameter(help="Read pages from a deployed site instead")
    ] = None,
    current: typ.Annotated[
        str | None, Parameter(help="Print this page as-is instead of a selection")
    ] = None,
    output_dir: typ.Annotated[
        Path | None, Parameter(help="Where to write the print document")
    ] = None,
    site_config: typ.Annotated[
        Path, Parameter(help="Path to site settings", env_var="INPUT_SITE_CONFIG")
    ] = DEFAULT_SITE_CONFIG,
    open_browser: typ.Annotated[
        bool, Parameter(help="Open the document in a browser to print it")
    ] = False,
    verbose: typ.Annotated[bool, Parameter(help="Enable debug logging")] = False,
) -> None:
    """Write a print document for every assignment, some, or one page.

    With no slugs every page listed in the assignments manifest is included;
    one slug prints that page; several slugs print them in the given order.

    Raises
    ------
    SystemExit
        With status 1 when the print content could not be collected.
    """
    _configure_logging(verbose)
    site = load_site_settings(site_config)
    source: PageSource = (
        HttpPageSource(base_url) if base_url else DirectoryPageSource(build_dir)
    )
    controller = PrintController(
        ContentAggregator(source),
        IsolatedRenderer(site.print_stylesheets),
        FilePrinter(output_dir or build_dir, open_browser=open_browser),
    )

    if current:
        written = controller.print_current(current)
    else:
        if not slugs:
            selection = PrintSelection.all()
        elif len(slugs) == 1:
            selection = PrintSelection.single(slugs[0])
        else:
            selection = PrintSelection.of(slugs)
        written = controller.print_selection(selection)

    if written is None:
        raise SystemExit(1)
    print(f"wrote {_format_path(written)}")


def main() -> None:
    """Invoke the Cyclopts application that powers the `pages` console command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
