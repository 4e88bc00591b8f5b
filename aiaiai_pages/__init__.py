"""Static site generator for the aiaiai assignment collection.

This package exposes the CLI entry points used by ``pages build`` to render
the site from the WordPress REST API and ``pages print`` to assemble printable
bundles of assignment pages.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from aiaiai_pages import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
