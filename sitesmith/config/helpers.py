"""Utility helpers shared by the sitesmith configuration loader."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from sitesmith.models import ThemeConfig, _optional_str

from .models import ConfigError, DesignSystemConfig, OptimizerConfig

_SCSS_IDENTIFIER = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-_"


def _resolve_path(value: object | None, base_dir: Path) -> Path | None:
    """Resolve ``value`` against ``base_dir`` unless it is already absolute."""
    text = _optional_str(value)
    if text is None:
        return None
    path = Path(text).expanduser()
    return path if path.is_absolute() else base_dir / path


def _as_mapping(value: object, section: str) -> typ.Mapping[str, typ.Any]:
    match value:
        case None:
            return {}
        case dict():
            return value
        case _:
            msg = f"'{section}' must be a mapping, got {type(value).__name__}."
            raise ConfigError(msg)


def _build_theme_config(payload: typ.Mapping[str, typ.Any]) -> ThemeConfig:
    """Build the default ThemeConfig from the ``theme`` mapping."""
    base = ThemeConfig()
    return ThemeConfig(
        primary_color=_optional_str(payload.get("primary_color")) or base.primary_color,
        font_family=_optional_str(payload.get("font_family")) or base.font_family,
    )


def _build_design_system(
    payload: typ.Mapping[str, typ.Any], base_dir: Path
) -> DesignSystemConfig:
    """Build the DesignSystemConfig, validating the variable names."""
    base = DesignSystemConfig()
    design = DesignSystemConfig(
        path=_resolve_path(payload.get("path"), base_dir) or base.path,
        entry=_optional_str(payload.get("entry")) or base.entry,
        primary_variable=_optional_str(payload.get("primary_variable"))
        or base.primary_variable,
        font_variable=_optional_str(payload.get("font_variable"))
        or base.font_variable,
    )
    for variable in (design.primary_variable, design.font_variable):
        name = variable.lstrip("$")
        if not name or any(char not in _SCSS_IDENTIFIER for char in name):
            msg = f"Invalid SCSS variable name '{variable}'."
            raise ConfigError(msg)
    design.primary_variable = design.primary_variable.lstrip("$")
    design.font_variable = design.font_variable.lstrip("$")
    return design


def _build_optimizer_config(payload: typ.Mapping[str, typ.Any]) -> OptimizerConfig:
    raw = payload.get("safelist") or []
    if isinstance(raw, str):
        raw = raw.split()
    if not isinstance(raw, list):
        msg = "'optimizer.safelist' must be a list of class names."
        raise ConfigError(msg)
    safelist = [text for item in raw if (text := _optional_str(item))]
    return OptimizerConfig(safelist=safelist)


def _coerce_positive_int(value: object, key: str, default: int) -> int:
    if value is None:
        return default
    try:
        number = int(typ.cast("typ.SupportsInt", value))
    except (TypeError, ValueError) as exc:
        msg = f"'{key}' must be an integer, got {value!r}."
        raise ConfigError(msg) from exc
    if number < 1:
        msg = f"'{key}' must be at least 1, got {number}."
        raise ConfigError(msg)
    return number


__all__ = [
    "_as_mapping",
    "_build_design_system",
    "_build_optimizer_config",
    "_build_theme_config",
    "_coerce_positive_int",
    "_optional_str",
    "_resolve_path",
]
