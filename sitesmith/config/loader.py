"""Load builder configuration YAML into typed dataclasses."""

from __future__ import annotations

from pathlib import Path

from ruamel.yaml import YAML

from sitesmith._constants import DEFAULT_SITE_TITLE

from .helpers import (
    _as_mapping,
    _build_design_system,
    _build_optimizer_config,
    _build_theme_config,
    _coerce_positive_int,
    _optional_str,
    _resolve_path,
)
from .models import BuilderConfig

DEFAULT_CONFIG = Path("sitesmith.yaml")


def load_builder_config(path: Path) -> BuilderConfig:
    """Load the YAML configuration describing the site root and build options.

    Relative paths inside the file (``root``, ``templates_dir``,
    ``script_asset``, ``design_system.path``) resolve against the directory
    holding the configuration file.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``sitesmith.yaml``).

    Returns
    -------
    BuilderConfig
        Parsed configuration with packaged defaults filled in.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    ConfigError
        If a section has the wrong shape or a value is invalid.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from sitesmith.config import load_builder_config
    >>> config = load_builder_config(Path("sitesmith.yaml"))  # doctest: +SKIP
    >>> config.catalog_path.name  # doctest: +SKIP
    'sections.json'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    raw = dict(_as_mapping(loaded, "top-level"))
    base_dir = path.resolve().parent

    root = _resolve_path(raw.get("root"), base_dir) or base_dir
    defaults = BuilderConfig.default(root)
    return BuilderConfig(
        root=root,
        site_title=_optional_str(raw.get("site_title")) or DEFAULT_SITE_TITLE,
        theme=_build_theme_config(_as_mapping(raw.get("theme"), "theme")),
        design_system=_build_design_system(
            _as_mapping(raw.get("design_system"), "design_system"), base_dir
        ),
        optimizer=_build_optimizer_config(
            _as_mapping(raw.get("optimizer"), "optimizer")
        ),
        templates_dir=_resolve_path(raw.get("templates_dir"), base_dir)
        or defaults.templates_dir,
        script_asset=_resolve_path(raw.get("script_asset"), base_dir)
        or defaults.script_asset,
        site_id_bytes=_coerce_positive_int(
            raw.get("site_id_bytes"), "site_id_bytes", defaults.site_id_bytes
        ),
        keep_failed_builds=bool(raw.get("keep_failed_builds", False)),
    )


def resolve_builder_config(
    path: Path | None, *, root: Path | None = None
) -> BuilderConfig:
    """Return the config at ``path``, or the packaged defaults.

    An explicit ``path`` must exist. Without one, ``sitesmith.yaml`` in the
    working directory is used when present; otherwise the defaults are rooted
    at ``root`` (or the working directory).
    """
    if path is not None:
        return load_builder_config(path)
    if DEFAULT_CONFIG.exists():
        return load_builder_config(DEFAULT_CONFIG)
    return BuilderConfig.default(root or Path.cwd())


__all__ = ["DEFAULT_CONFIG", "load_builder_config", "resolve_builder_config"]
