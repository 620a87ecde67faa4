"""Exception hierarchy raised by the build pipeline.

Every fatal pipeline condition derives from :class:`BuildError` so callers
(the HTTP layer and the CLI) can report failures uniformly. A missing catalog
is not represented here: it resolves to an empty catalog instead.
"""

from __future__ import annotations


class BuildError(RuntimeError):
    """Raised when a build cannot run to completion."""

    kind = "BuildError"


class CatalogError(BuildError):
    """Raised when the section catalog exists but cannot be parsed."""

    kind = "CatalogError"


class AssemblyFailure(BuildError):
    """Raised when a fragment or the base page template cannot be rendered."""

    kind = "AssemblyFailure"


class CompilationFailure(BuildError):
    """Raised when theme compilation or selector optimization fails."""

    kind = "CompilationFailure"


class MinificationFailure(BuildError):
    """Raised when the client script cannot be minified."""

    kind = "MinificationFailure"


class FilesystemFailure(BuildError):
    """Raised when a directory or artifact cannot be written."""

    kind = "FilesystemFailure"


class SiteIdCollision(FilesystemFailure):
    """Raised when the output directory for a fresh site id already exists."""

    kind = "SiteIdCollision"


class LogCorruption(BuildError):
    """Raised when the site log contains an entry that is not valid JSON."""

    kind = "LogCorruption"


__all__ = [
    "AssemblyFailure",
    "BuildError",
    "CatalogError",
    "CompilationFailure",
    "FilesystemFailure",
    "LogCorruption",
    "MinificationFailure",
    "SiteIdCollision",
]
