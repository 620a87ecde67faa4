"""JSON routes: catalog, site log, theme variables, and the build trigger."""

from __future__ import annotations

import json
import re
import typing as typ

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from sitesmith._constants import META_FILENAME
from sitesmith.config import BuilderConfig
from sitesmith.errors import BuildError
from sitesmith.log import get_logger
from sitesmith.models import BuildRequest, ThemeConfig
from sitesmith.pipeline import BuildOrchestrator
from sitesmith.registry import SectionRegistry, read_json_list
from sitesmith.sitelog import SiteLog

from .deps import get_config, get_orchestrator, get_site_log

router = APIRouter()
logger = get_logger(__name__)

_SITE_ID = re.compile(r"^[0-9a-f]+$")


class ThemePayload(BaseModel):
    """``bootstrapConfig`` object of a build request."""

    model_config = ConfigDict(populate_by_name=True)

    primary_color: str | None = Field(default=None, alias="primaryColor")
    font_family: str | None = Field(default=None, alias="fontFamily")


class BuildPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sections: list[str] = Field(default_factory=list)
    bootstrap_config: ThemePayload | None = Field(default=None, alias="bootstrapConfig")


def _failure(error: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=500, content={"success": False, "error": str(error)}
    )


@router.get("/sections")
def list_sections(config: BuilderConfig = Depends(get_config)) -> typ.Any:
    try:
        registry = SectionRegistry.from_catalog(config.catalog_path)
    except BuildError as exc:
        return _failure(exc)
    return [definition.to_payload() for definition in registry.definitions()]


@router.get("/sites.json")
def list_sites(site_log: SiteLog = Depends(get_site_log)) -> typ.Any:
    try:
        return site_log.payload()
    except BuildError as exc:
        return _failure(exc)


@router.get("/sites/{site_id}")
def get_site(site_id: str, config: BuilderConfig = Depends(get_config)) -> typ.Any:
    meta_path = config.dist_dir / site_id / META_FILENAME
    if not _SITE_ID.match(site_id) or not meta_path.is_file():
        raise HTTPException(status_code=404, detail="Site not found")
    try:
        return json.loads(meta_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        return _failure(exc)


@router.get("/bootstrap-variables")
def list_theme_variables(config: BuilderConfig = Depends(get_config)) -> typ.Any:
    try:
        return read_json_list(config.theme_variables_path)
    except (ValueError, TypeError) as exc:
        return _failure(exc)


@router.post("/build")
def build_site(
    payload: BuildPayload,
    config: BuilderConfig = Depends(get_config),
    orchestrator: BuildOrchestrator = Depends(get_orchestrator),
) -> typ.Any:
    theme_data = None
    if payload.bootstrap_config:
        theme_data = payload.bootstrap_config.model_dump(by_alias=True)
    request = BuildRequest.create(
        payload.sections,
        ThemeConfig.from_payload(theme_data, defaults=config.theme),
    )
    try:
        result = orchestrator.build(request)
    except BuildError as exc:
        return _failure(exc)
    logger.info("site_built", site_id=result.id, output=result.output_path)
    return {
        "success": True,
        "message": "Site built successfully",
        "output": result.output_path,
    }
