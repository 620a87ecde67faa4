"""Cyclopts CLI entrypoint for serving the generator and running builds.

The ``sitesmith`` console script defined here starts the HTTP server that
backs the generator UI, runs a single build without the server, and prints
the section catalog or the site log. Options can also be supplied through
``SITESMITH_*`` environment variables.

Examples
--------
Serve the generator UI for the site root described in ``sitesmith.yaml``:

>>> from sitesmith.cli import main
>>> main()  # doctest: +SKIP

Build a page with two sections and a red theme:

>>> from sitesmith.cli import app
>>> app.run(
...     ["build", "hero", "contact", "--primary-color", "#ff0000"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import BuilderConfig, resolve_builder_config
from .errors import BuildError
from .log import configure_logging
from .models import BuildRequest, ThemeConfig
from .pipeline import BuildOrchestrator
from .registry import SectionRegistry
from .sitelog import SiteLog

app = App(name="sitesmith", config=cyclopts.config.Env("SITESMITH_", command=False))  # type: ignore[unknown-argument]

ConfigOption = typ.Annotated[
    Path | None,
    Parameter(help="Path to sitesmith.yaml", env_var="SITESMITH_CONFIG"),
]
VerboseOption = typ.Annotated[bool, Parameter(help="Log debug events")]


def _load(config: Path | None, *, verbose: bool = False) -> BuilderConfig:
    configure_logging(verbose=verbose)
    return resolve_builder_config(config)


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


@app.command(help="Serve the generator UI, build API, and generated sites.")
def serve(
    *,
    host: typ.Annotated[str, Parameter(help="Host to bind")] = "127.0.0.1",
    port: typ.Annotated[int, Parameter(help="Port to bind")] = 3000,
    config: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Start the HTTP server with uvicorn."""
    import uvicorn

    from .server import create_app

    builder_config = _load(config, verbose=verbose)
    print(f"Serving {_format_path(builder_config.root)} on http://{host}:{port}")
    uvicorn.run(create_app(builder_config), host=host, port=port)


@app.command(help="Build one site from catalogued sections.")
def build(
    *sections: str,
    primary_color: typ.Annotated[
        str | None, Parameter(help="Theme primary colour")
    ] = None,
    font_family: typ.Annotated[
        str | None, Parameter(help="Theme font stack")
    ] = None,
    config: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Run the build pipeline once and print the generated index path.

    Parameters
    ----------
    sections : str
        Section names in page order; names missing from the catalog are
        skipped.
    primary_color : str or None, optional
        Overrides the configured default primary colour.
    font_family : str or None, optional
        Overrides the configured default font stack.
    config : Path or None, optional
        Path to ``sitesmith.yaml`` (``SITESMITH_CONFIG``).
    verbose : bool, optional
        Emit debug logging.

    Raises
    ------
    SystemExit
        With status 1 when the build fails.
    """
    builder_config = _load(config, verbose=verbose)
    theme = ThemeConfig.from_payload(
        {"primaryColor": primary_color, "fontFamily": font_family},
        defaults=builder_config.theme,
    )
    orchestrator = BuildOrchestrator(builder_config)
    try:
        result = orchestrator.build(BuildRequest.create(sections, theme))
    except BuildError as exc:
        print(f"build failed: {exc}")
        raise SystemExit(1) from exc
    print(f"wrote {_format_path(builder_config.root / result.output_path)}")


@app.command(help="List completed builds from the site log.")
def sites(*, config: ConfigOption = None) -> None:
    builder_config = _load(config)
    try:
        entries = SiteLog(builder_config.site_log_path).entries()
    except BuildError as exc:
        print(f"sites failed: {exc}")
        raise SystemExit(1) from exc
    for entry in entries:
        names = ", ".join(entry.sections) or "-"
        stamp = entry.timestamp.isoformat()
        print(f"{entry.id}  {stamp}  {entry.output_path}  [{names}]")


@app.command(help="List the sections available in the catalog.")
def sections(*, config: ConfigOption = None) -> None:
    builder_config = _load(config)
    try:
        registry = SectionRegistry.from_catalog(builder_config.catalog_path)
    except BuildError as exc:
        print(f"sections failed: {exc}")
        raise SystemExit(1) from exc
    for definition in registry.definitions():
        print(f"{definition.name}  {definition.category}  {definition.label}")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``sitesmith`` command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
