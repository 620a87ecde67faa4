"""FastAPI application factory for the generator UI and build API."""

from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from sitesmith.config import BuilderConfig, resolve_builder_config
from sitesmith.version import __version__

from . import api

STATIC_DIR = Path(__file__).resolve().parents[1] / "static"


def create_app(config: BuilderConfig | None = None) -> FastAPI:
    """Build the app serving the UI, the JSON routes, and generated sites.

    Parameters
    ----------
    config : BuilderConfig, optional
        Resolved configuration; defaults to ``sitesmith.yaml`` in the working
        directory or the packaged defaults.
    """
    config = config or resolve_builder_config(None)
    config.dist_dir.mkdir(parents=True, exist_ok=True)

    app = FastAPI(
        title="sitesmith",
        description="Static site generator",
        version=__version__,
    )
    app.state.config = config

    @app.get("/", include_in_schema=False)
    def index() -> FileResponse:
        return FileResponse(STATIC_DIR / "index.html")

    app.include_router(api.router)
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
    app.mount(
        "/dist", StaticFiles(directory=str(config.dist_dir), html=True), name="dist"
    )
    return app
