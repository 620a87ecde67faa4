"""Load and validate the sitesmith builder configuration.

This subpackage parses ``sitesmith.yaml``, resolves paths relative to the
file, fills in packaged defaults (templates, design-system stylesheet, client
script) and produces a :class:`BuilderConfig` that the registry, pipeline,
and server consume.

Examples
--------
>>> from pathlib import Path
>>> from sitesmith.config import load_builder_config
>>> config = load_builder_config(Path("sitesmith.yaml"))  # doctest: +SKIP
>>> config.theme.primary_color  # doctest: +SKIP
'#007bff'
"""

from .loader import DEFAULT_CONFIG, load_builder_config, resolve_builder_config
from .models import (
    PACKAGE_ROOT,
    BuilderConfig,
    ConfigError,
    DesignSystemConfig,
    OptimizerConfig,
)

__all__ = [
    "DEFAULT_CONFIG",
    "PACKAGE_ROOT",
    "BuilderConfig",
    "ConfigError",
    "DesignSystemConfig",
    "OptimizerConfig",
    "load_builder_config",
    "resolve_builder_config",
]
