"""Compile the design-system stylesheet with per-build theme overrides."""

from __future__ import annotations

import re
import typing as typ

import sass

from sitesmith.errors import CompilationFailure

if typ.TYPE_CHECKING:
    from sitesmith.config import DesignSystemConfig
    from sitesmith.models import ThemeConfig

# A value must stay inside its own variable assignment.
_UNSAFE_VALUE = re.compile(r"[;{}\n\r]|/\*|//|#\{")


class ThemeCompiler:
    """Substitute theme values into the design system and compile to CSS."""

    def __init__(
        self, design: DesignSystemConfig, *, output_style: str = "expanded"
    ) -> None:
        self.design = design
        self.output_style = output_style

    def override_block(self, theme: ThemeConfig) -> str:
        """Return the SCSS source compiled for ``theme``.

        Raises
        ------
        CompilationFailure
            If a theme value contains characters that would escape its
            variable assignment.
        """
        assignments = (
            (self.design.primary_variable, theme.primary_color),
            (self.design.font_variable, theme.font_family),
        )
        lines: list[str] = []
        for variable, value in assignments:
            if _UNSAFE_VALUE.search(value):
                msg = (
                    f"Theme value {value!r} for ${variable} is not a plain SCSS value."
                )
                raise CompilationFailure(msg)
            lines.append(f"${variable}: {value.strip()};")
        lines.append(f'@import "{self.design.entry}";')
        return "\n".join(lines) + "\n"

    def compile(self, theme: ThemeConfig) -> str:
        """Compile the themed stylesheet.

        Raises
        ------
        CompilationFailure
            If libsass rejects the override block or the design system, for
            example when the primary color cannot be parsed as a color.
        """
        source = self.override_block(theme)
        try:
            return sass.compile(
                string=source,
                include_paths=[str(self.design.path)],
                output_style=self.output_style,
            )
        except sass.CompileError as exc:
            msg = f"Theme compilation failed: {exc}"
            raise CompilationFailure(msg) from exc


__all__ = ["ThemeCompiler"]
