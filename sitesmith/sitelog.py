"""Append-only record of every completed build.

The log is a JSON Lines file: one ``SiteLogEntry`` object per line, in build
completion order. Appends go through a single ``write`` on a file opened in
append mode while holding a process-wide lock, so builds completing at the
same time never overwrite each other's entries. Existing lines are never
rewritten.

Examples
--------
>>> from pathlib import Path
>>> log = SiteLog(Path("site/sites.jsonl"))  # doctest: +SKIP
>>> [entry.id for entry in log.entries()]  # doctest: +SKIP
['a1b2c3d4']
"""

from __future__ import annotations

import json
import threading
import typing as typ

from .errors import FilesystemFailure, LogCorruption
from .models import SiteLogEntry

if typ.TYPE_CHECKING:
    from pathlib import Path

_APPEND_LOCK = threading.Lock()


class SiteLog:
    """Read and append entries in the global site log."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def append(self, entry: SiteLogEntry) -> None:
        """Append ``entry`` as one line.

        Raises
        ------
        FilesystemFailure
            If the log file cannot be opened or written.
        """
        line = json.dumps(entry.to_payload(), ensure_ascii=False) + "\n"
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with _APPEND_LOCK, self.path.open("ab") as handle:
                handle.write(line.encode("utf-8"))
        except OSError as exc:
            msg = f"Unable to append to site log '{self.path}': {exc}"
            raise FilesystemFailure(msg) from exc

    def payload(self) -> list[dict[str, typ.Any]]:
        """Return the raw entry objects, or ``[]`` when the log is missing.

        Raises
        ------
        LogCorruption
            If a line is not a JSON object.
        """
        try:
            text = self.path.read_bytes()
        except FileNotFoundError:
            return []
        records: list[dict[str, typ.Any]] = []
        for number, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                record = json.loads(line)
            except ValueError as exc:
                msg = f"Site log '{self.path}' line {number} is not valid JSON: {exc}"
                raise LogCorruption(msg) from exc
            if not isinstance(record, dict):
                msg = f"Site log '{self.path}' line {number} is not an object."
                raise LogCorruption(msg)
            records.append(record)
        return records

    def entries(self) -> list[SiteLogEntry]:
        """Return typed entries in completion order."""
        entries: list[SiteLogEntry] = []
        for record in self.payload():
            try:
                entries.append(SiteLogEntry.from_mapping(record))
            except (KeyError, TypeError, ValueError) as exc:
                msg = f"Site log '{self.path}' holds a malformed entry: {exc}"
                raise LogCorruption(msg) from exc
        return entries

    def ids(self) -> set[str]:
        return {str(record.get("id")) for record in self.payload()}


__all__ = ["SiteLog"]
