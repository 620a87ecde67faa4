"""Section catalog lookups.

The catalog is a JSON list of section objects kept in ``sections.json`` under
the site root. It is edited by hand and only ever read here. A missing catalog
behaves as an empty one, so every lookup resolves to nothing instead of
failing the build; the generator UI relies on that.

Examples
--------
>>> from pathlib import Path
>>> registry = SectionRegistry.from_catalog(Path("missing.json"))
>>> registry.lookup(["hero"])
[]
"""

from __future__ import annotations

import json
import typing as typ

from .errors import CatalogError
from .log import get_logger
from .models import SectionDefinition

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

logger = get_logger(__name__)


def read_json_list(path: Path) -> list[typ.Any]:
    """Return the JSON list stored at ``path``, or ``[]`` when it is missing.

    Raises
    ------
    json.JSONDecodeError
        If the file is not valid JSON.
    TypeError
        If the document is not a JSON list.
    """
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        return []
    decoded = json.loads(raw) if raw.strip() else []
    if not isinstance(decoded, list):
        msg = f"Expected a JSON list in '{path}', got {type(decoded).__name__}."
        raise TypeError(msg)
    return decoded


class SectionRegistry:
    """Immutable name-to-definition mapping loaded from the catalog."""

    def __init__(self, definitions: cabc.Iterable[SectionDefinition] = ()) -> None:
        self._definitions: dict[str, SectionDefinition] = {}
        for definition in definitions:
            # First entry wins when a name is catalogued twice.
            self._definitions.setdefault(definition.name, definition)

    @classmethod
    def from_catalog(cls, path: Path) -> SectionRegistry:
        """Load the catalog at ``path``; a missing file yields an empty registry.

        Raises
        ------
        CatalogError
            If the file exists but is not a JSON list of section objects.
        """
        if not path.exists():
            logger.info("catalog_missing", path=str(path))
            return cls()
        try:
            entries = read_json_list(path)
            definitions = [SectionDefinition.from_mapping(entry) for entry in entries]
        except (AttributeError, TypeError, ValueError) as exc:
            msg = f"Section catalog '{path}' is invalid: {exc}"
            raise CatalogError(msg) from exc
        return cls(definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def definitions(self) -> list[SectionDefinition]:
        """Return every catalogued section in catalog order."""
        return list(self._definitions.values())

    def get(self, name: str) -> SectionDefinition | None:
        """Return the definition for ``name`` or ``None`` when uncatalogued."""
        return self._definitions.get(name)

    def lookup(self, names: cabc.Iterable[str]) -> list[SectionDefinition]:
        """Return definitions for ``names`` in request order, skipping misses."""
        found: list[SectionDefinition] = []
        for name in names:
            definition = self._definitions.get(name)
            if definition is None:
                logger.debug("section_skipped", section=name)
                continue
            found.append(definition)
        return found


__all__ = ["SectionRegistry", "read_json_list"]
