"""Minify the client-side script shared by every generated site.

``jsmin`` does not report malformed input: it loops on an unclosed block
comment and cuts an unclosed string short. :func:`find_unterminated` scans the
source first, tracking strings, template literals, comments and regular
expression literals, so those inputs fail with :class:`MinificationFailure`
instead.

Examples
--------
>>> find_unterminated("var a = 1; /* open")
'block comment'
>>> find_unterminated("var r = /\\"/g;") is None
True
"""

from __future__ import annotations

import typing as typ

import jsmin

from sitesmith.errors import FilesystemFailure, MinificationFailure

if typ.TYPE_CHECKING:
    from pathlib import Path

# Tokens after which a slash opens a regular expression rather than dividing.
_REGEX_PRECEDERS = frozenset("(,=:[!&|?{};~+-*%<>^")
_REGEX_KEYWORDS = frozenset(
    {
        "await",
        "case",
        "delete",
        "do",
        "else",
        "in",
        "instanceof",
        "new",
        "return",
        "throw",
        "typeof",
        "void",
        "yield",
    }
)
_VALUE = "value"


def find_unterminated(source: str) -> str | None:
    """Return the kind of the first unterminated token in ``source``, if any.

    The result is one of ``"string"``, ``"template literal"``,
    ``"block comment"`` or ``"regular expression"``; ``None`` means every
    token is closed.
    """
    index = 0
    length = len(source)
    last = ";"
    while index < length:
        char = source[index]
        if char in "\"'`":
            end = _string_end(source, index)
            if end < 0:
                return "template literal" if char == "`" else "string"
            index = end
            last = _VALUE
        elif source.startswith("//", index):
            newline = source.find("\n", index)
            index = length if newline < 0 else newline
        elif source.startswith("/*", index):
            close = source.find("*/", index + 2)
            if close < 0:
                return "block comment"
            index = close + 2
        elif char == "/" and (last in _REGEX_PRECEDERS or last in _REGEX_KEYWORDS):
            end = _regex_end(source, index)
            if end < 0:
                return "regular expression"
            index = end
            last = _VALUE
        elif char.isspace():
            index += 1
        elif _is_word_char(char):
            start = index
            while index < length and _is_word_char(source[index]):
                index += 1
            last = source[start:index]
        else:
            last = char
            index += 1
    return None


def _is_word_char(char: str) -> bool:
    return char.isalnum() or char in "_$"


def _string_end(source: str, index: int) -> int:
    """Return the index past the literal opened at ``index``, or -1."""
    quote = source[index]
    index += 1
    length = len(source)
    while index < length:
        char = source[index]
        if char == "\\":
            index += 2
            continue
        if char == quote:
            return index + 1
        if char == "\n" and quote != "`":
            return -1
        index += 1
    return -1


def _regex_end(source: str, index: int) -> int:
    """Return the index past the regex literal opened at ``index``, or -1."""
    index += 1
    length = len(source)
    in_class = False
    while index < length:
        char = source[index]
        if char == "\\":
            index += 2
            continue
        if char == "\n":
            return -1
        if char == "[":
            in_class = True
        elif char == "]":
            in_class = False
        elif char == "/" and not in_class:
            return index + 1
        index += 1
    return -1


class ScriptBundler:
    """Read and minify the fixed script asset."""

    def __init__(self, asset: Path) -> None:
        self.asset = asset

    def read_source(self) -> str:
        try:
            return self.asset.read_text(encoding="utf-8")
        except OSError as exc:
            msg = f"Unable to read script asset '{self.asset}': {exc}"
            raise FilesystemFailure(msg) from exc

    def bundle(self, source: str | None = None) -> str:
        """Return minified JavaScript for ``source`` (or the configured asset).

        Raises
        ------
        MinificationFailure
            If the script holds an unterminated token or the minifier rejects
            it.
        """
        text = self.read_source() if source is None else source
        problem = find_unterminated(text)
        if problem is not None:
            msg = f"Script minification failed: unterminated {problem}."
            raise MinificationFailure(msg)
        try:
            minified = jsmin.jsmin(text, quote_chars="'\"`")
        except Exception as exc:  # noqa: BLE001 - jsmin has no error type of its own
            msg = f"Script minification failed: {exc.__class__.__name__}: {exc}"
            raise MinificationFailure(msg) from exc
        return minified.strip() + "\n" if minified.strip() else ""


__all__ = ["ScriptBundler", "find_unterminated"]
