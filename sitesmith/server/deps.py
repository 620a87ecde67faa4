"""Request-scoped collaborators for the HTTP routes."""

from __future__ import annotations

from fastapi import Request

from sitesmith.config import BuilderConfig
from sitesmith.pipeline import BuildOrchestrator
from sitesmith.sitelog import SiteLog


def get_config(request: Request) -> BuilderConfig:
    """Return the configuration the app was created with."""
    return request.app.state.config


def get_site_log(request: Request) -> SiteLog:
    return SiteLog(get_config(request).site_log_path)


def get_orchestrator(request: Request) -> BuildOrchestrator:
    """Return a fresh orchestrator; each build tracks its own state."""
    config = get_config(request)
    return BuildOrchestrator(config, site_log=SiteLog(config.site_log_path))
