"""Typed dataclasses describing sitesmith server configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from sitesmith._constants import (
    DEFAULT_SITE_TITLE,
    DIST_DIR,
    SECTIONS_CATALOG,
    SITE_LOG,
    THEME_VARIABLES_CATALOG,
)
from sitesmith.models import ThemeConfig

PACKAGE_ROOT = Path(__file__).resolve().parents[1]


class ConfigError(ValueError):
    """Raised when the builder configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class DesignSystemConfig:
    """Where the themed stylesheet comes from and which variables it exposes.

    ``path`` is handed to libsass as an include path and ``entry`` is the
    partial imported after the override block (``design`` resolves
    ``_design.scss``; a Bootstrap checkout uses ``bootstrap``).
    """

    path: Path = PACKAGE_ROOT / "assets" / "scss"
    entry: str = "design"
    primary_variable: str = "primary"
    font_variable: str = "font-family-base"


@dc.dataclass(slots=True)
class OptimizerConfig:
    """Selector purge tuning."""

    safelist: list[str] = dc.field(default_factory=list)


@dc.dataclass(slots=True)
class BuilderConfig:
    """A fully resolved server and build configuration."""

    root: Path
    site_title: str
    theme: ThemeConfig
    design_system: DesignSystemConfig
    optimizer: OptimizerConfig
    templates_dir: Path = PACKAGE_ROOT / "templates"
    script_asset: Path = PACKAGE_ROOT / "assets" / "js" / "site.js"
    site_id_bytes: int = 4
    keep_failed_builds: bool = False

    @classmethod
    def default(cls, root: Path) -> BuilderConfig:
        """Return the packaged defaults rooted at ``root``."""
        return cls(
            root=root,
            site_title=DEFAULT_SITE_TITLE,
            theme=ThemeConfig(),
            design_system=DesignSystemConfig(),
            optimizer=OptimizerConfig(),
        )

    @property
    def catalog_path(self) -> Path:
        return self.root / SECTIONS_CATALOG

    @property
    def theme_variables_path(self) -> Path:
        return self.root / THEME_VARIABLES_CATALOG

    @property
    def site_log_path(self) -> Path:
        return self.root / SITE_LOG

    @property
    def dist_dir(self) -> Path:
        return self.root / DIST_DIR


__all__ = [
    "PACKAGE_ROOT",
    "BuilderConfig",
    "ConfigError",
    "DesignSystemConfig",
    "OptimizerConfig",
]
