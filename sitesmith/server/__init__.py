"""HTTP surface for the generator UI and the build pipeline."""

from .app import create_app

__all__ = ["create_app"]
