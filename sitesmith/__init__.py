"""A web-based static site generator.

This package exposes the build pipeline that turns catalogued page sections
and a theme into a generated site, the FastAPI server that drives it from the
generator UI, and the ``sitesmith`` CLI.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from sitesmith import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
