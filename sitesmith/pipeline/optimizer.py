"""Remove unused selectors from a stylesheet and minify what remains.

Usage is collected from the rendered page and the bundled script: tag names,
class names and ids from the HTML tree, plus every identifier-shaped token in
either text (so classes toggled from JavaScript survive). A style rule keeps
each selector whose classes and ids are all used; element-only selectors are
always kept. Grouping at-rules (``@media``, ``@supports`` ...) are purged
recursively, while rules such as ``@font-face`` and ``@keyframes`` pass
through untouched. The optimizer only ever deletes selectors, never adds them.

Example
-------
>>> optimizer = CssOptimizer()
>>> optimizer.purge(".a{color:red}.b{color:blue}", '<p class="a"></p>', "")
'.a{color:red}'
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

import csscompressor
from bs4 import BeautifulSoup

from sitesmith.errors import CompilationFailure
from sitesmith.log import get_logger

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = get_logger(__name__)

GROUPING_AT_RULES = frozenset(
    {"media", "supports", "layer", "container", "document", "-moz-document", "scope"}
)
CONTENT_TOKEN = re.compile(r"[\w-]+")
CLASS_OR_ID = re.compile(
    r"([.#])((?:\\[0-9a-fA-F]{1,6}[ \t\r\n\f]?|\\[^\r\n\f0-9a-fA-F]|[\w-])+)"
)
CSS_ESCAPE = re.compile(r"\\(?:([0-9a-fA-F]{1,6})[ \t\r\n\f]?|(.))", re.DOTALL)
AT_RULE_NAME = re.compile(r"@([\w-]+)")
_ATTRIBUTE_SELECTOR = re.compile(r"\[[^\[\]]*\]")
_FUNCTION_ARGS = re.compile(r"\([^()]*\)")


class CssSyntaxError(ValueError):
    """Raised when a stylesheet cannot be split into rules."""


@dc.dataclass(slots=True)
class Statement:
    """A block-less at-rule such as ``@import`` or ``@charset``."""

    text: str

    def render(self) -> str:
        return self.text


@dc.dataclass(slots=True)
class StyleRule:
    selectors: list[str]
    declarations: str

    def render(self) -> str:
        return f"{','.join(self.selectors)}{{{self.declarations}}}"


@dc.dataclass(slots=True)
class AtRule:
    """A block at-rule; ``children`` is set only for grouping rules."""

    prelude: str
    body: str
    children: list[Node] | None = None

    @property
    def name(self) -> str:
        match = AT_RULE_NAME.match(self.prelude)
        return match.group(1).lower() if match else ""

    def render(self) -> str:
        if self.children is None:
            return f"{self.prelude}{{{self.body}}}"
        inner = "".join(child.render() for child in self.children)
        return f"{self.prelude}{{{inner}}}"


Node = Statement | StyleRule | AtRule


def parse_stylesheet(css: str) -> list[Node]:
    """Split ``css`` into top-level nodes, recursing into grouping at-rules.

    Raises
    ------
    CssSyntaxError
        If braces or strings are unbalanced.
    """
    return _parse_nodes(strip_comments(css))


def render_stylesheet(nodes: cabc.Iterable[Node]) -> str:
    return "".join(node.render() for node in nodes)


def strip_comments(css: str) -> str:
    """Remove ``/* ... */`` comments while leaving string contents alone."""
    out: list[str] = []
    index = 0
    length = len(css)
    while index < length:
        char = css[index]
        if char in "\"'":
            end = _skip_string(css, index)
            out.append(css[index:end])
            index = end
        elif css.startswith("/*", index):
            close = css.find("*/", index + 2)
            if close < 0:
                msg = "Unterminated comment in stylesheet."
                raise CssSyntaxError(msg)
            index = close + 2
        else:
            out.append(char)
            index += 1
    return "".join(out)


def split_selectors(prelude: str) -> list[str]:
    """Split a selector list on commas outside parentheses and brackets."""
    selectors: list[str] = []
    depth = 0
    start = 0
    for index, char in enumerate(prelude):
        if char in "([":
            depth += 1
        elif char in ")]":
            depth = max(depth - 1, 0)
        elif char == "," and depth == 0:
            selectors.append(prelude[start:index].strip())
            start = index + 1
    selectors.append(prelude[start:].strip())
    return [selector for selector in selectors if selector]


def selector_requirements(selector: str) -> set[str]:
    """Return the class names and ids ``selector`` needs to match anything.

    Attribute selectors and the arguments of functional pseudo-classes such as
    ``:not(.hidden)`` are not requirements.
    """
    stripped = _ATTRIBUTE_SELECTOR.sub("", selector)
    previous = None
    while previous != stripped:
        previous = stripped
        stripped = _FUNCTION_ARGS.sub("", stripped)
    matches = CLASS_OR_ID.finditer(stripped)
    return {unescape_identifier(match.group(2)) for match in matches}


def unescape_identifier(text: str) -> str:
    r"""Decode CSS escapes (``\31 `` or ``\:``) in a class name or id.

    >>> unescape_identifier(r"\31 23")
    '123'
    """
    return CSS_ESCAPE.sub(_decode_escape, text)


def _decode_escape(match: re.Match[str]) -> str:
    if match.group(1) is None:
        return match.group(2)
    codepoint = int(match.group(1), 16)
    if codepoint == 0 or codepoint > 0x10FFFF or 0xD800 <= codepoint <= 0xDFFF:
        return "\ufffd"
    return chr(codepoint)


def collect_used_names(html: str, js: str) -> set[str]:
    """Return tag names, classes, ids, and word tokens found in the sources."""
    used: set[str] = set()
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup.find_all(True):
        used.add(tag.name)
        classes = tag.get("class") or []
        if isinstance(classes, str):
            classes = classes.split()
        used.update(classes)
        tag_id = tag.get("id")
        if tag_id:
            used.add(str(tag_id))
    for text in (html, js):
        used.update(CONTENT_TOKEN.findall(text))
    return used


class CssOptimizer:
    """Purge unreferenced selectors and minify the stylesheet."""

    def __init__(self, safelist: cabc.Iterable[str] = ()) -> None:
        self.safelist = frozenset(safelist)

    def used_names(self, html: str, js: str) -> set[str]:
        return collect_used_names(html, js) | self.safelist

    def purge(self, css: str, html: str, js: str) -> str:
        """Return ``css`` without the selectors unused by ``html`` and ``js``.

        Raises
        ------
        CompilationFailure
            If the stylesheet cannot be parsed.
        """
        try:
            nodes = parse_stylesheet(css)
        except CssSyntaxError as exc:
            msg = f"CSS optimization failed: {exc}"
            raise CompilationFailure(msg) from exc
        used = self.used_names(html, js)
        stats = {"kept": 0, "removed": 0}
        purged = _purge_nodes(nodes, used, stats)
        logger.debug("css_purged", **stats)
        return render_stylesheet(purged)

    def optimize(self, css: str, html: str, js: str) -> str:
        """Purge unused selectors, then minify the remainder."""
        purged = self.purge(css, html, js)
        try:
            return csscompressor.compress(purged)
        except (ValueError, IndexError) as exc:  # pragma: no cover - minifier guard
            msg = f"CSS minification failed: {exc}"
            raise CompilationFailure(msg) from exc


def _purge_nodes(
    nodes: cabc.Iterable[Node], used: set[str], stats: dict[str, int]
) -> list[Node]:
    kept: list[Node] = []
    for node in nodes:
        match node:
            case StyleRule(selectors=selectors, declarations=declarations):
                survivors = [
                    selector
                    for selector in selectors
                    if selector_requirements(selector) <= used
                ]
                stats["kept"] += len(survivors)
                stats["removed"] += len(selectors) - len(survivors)
                if survivors:
                    kept.append(StyleRule(survivors, declarations))
            case AtRule(children=list() as children):
                remaining = _purge_nodes(children, used, stats)
                if remaining:
                    kept.append(AtRule(node.prelude, node.body, remaining))
            case _:
                kept.append(node)
    return kept


def _parse_nodes(css: str) -> list[Node]:
    nodes: list[Node] = []
    index = 0
    start = 0
    length = len(css)
    while index < length:
        char = css[index]
        if char in "\"'":
            index = _skip_string(css, index)
            continue
        if char == ";":
            text = css[start:index].strip()
            if text:
                nodes.append(Statement(f"{text};"))
            start = index + 1
        elif char == "{":
            prelude = css[start:index].strip()
            end = _block_end(css, index + 1)
            nodes.append(_make_block(prelude, css[index + 1 : end]))
            index = end + 1
            start = index
            continue
        elif char == "}":
            msg = "Unexpected '}' in stylesheet."
            raise CssSyntaxError(msg)
        index += 1
    trailing = css[start:].strip()
    if trailing:
        msg = f"Unterminated rule in stylesheet: {trailing[:40]!r}"
        raise CssSyntaxError(msg)
    return nodes


def _make_block(prelude: str, body: str) -> Node:
    if prelude.startswith("@"):
        rule = AtRule(prelude, body.strip())
        if rule.name in GROUPING_AT_RULES:
            rule.children = _parse_nodes(body)
        return rule
    return StyleRule(split_selectors(prelude), body.strip())


def _block_end(css: str, index: int) -> int:
    """Return the index of the ``}`` closing the block opened before ``index``."""
    depth = 1
    length = len(css)
    while index < length:
        char = css[index]
        if char in "\"'":
            index = _skip_string(css, index)
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
        index += 1
    msg = "Unclosed block in stylesheet."
    raise CssSyntaxError(msg)


def _skip_string(css: str, index: int) -> int:
    """Return the index just past the string literal starting at ``index``."""
    quote = css[index]
    index += 1
    length = len(css)
    while index < length:
        char = css[index]
        if char == "\\":
            index += 2
            continue
        if char == quote:
            return index + 1
        if char == "\n":
            break
        index += 1
    msg = "Unterminated string in stylesheet."
    raise CssSyntaxError(msg)


__all__ = [
    "AtRule",
    "CssOptimizer",
    "CssSyntaxError",
    "Statement",
    "StyleRule",
    "collect_used_names",
    "parse_stylesheet",
    "render_stylesheet",
    "selector_requirements",
    "split_selectors",
    "unescape_identifier",
]
