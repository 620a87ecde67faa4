"""Typed dataclasses describing sections, themes, and build records.

Records travel to disk and over HTTP as camelCase JSON objects; each dataclass
owns the conversion to and from that wire form so the registry, site log, and
server agree on one shape.
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import typing as typ

from ._constants import DEFAULT_FONT_FAMILY, DEFAULT_PRIMARY_COLOR


@dc.dataclass(frozen=True, slots=True)
class SectionDefinition:
    """A catalog entry naming a pre-authored page fragment."""

    name: str
    label: str
    category: str
    fragment_ref: str

    @classmethod
    def from_mapping(cls, data: typ.Mapping[str, typ.Any]) -> SectionDefinition:
        """Build a definition from a catalog object.

        ``template`` is accepted as an alias of ``fragmentRef`` and the label
        falls back to a title-cased name.
        """
        name = str(data.get("name") or "").strip()
        fragment_ref = data.get("fragmentRef") or data.get("template")
        if not name or not fragment_ref:
            msg = f"Section entry {dict(data)!r} needs 'name' and 'fragmentRef'."
            raise ValueError(msg)
        label = data.get("label") or name.replace("-", " ").title()
        return cls(
            name=name,
            label=str(label),
            category=str(data.get("category") or "general"),
            fragment_ref=str(fragment_ref),
        )

    def to_payload(self) -> dict[str, str]:
        return {
            "name": self.name,
            "label": self.label,
            "category": self.category,
            "fragmentRef": self.fragment_ref,
        }


@dc.dataclass(frozen=True, slots=True)
class ResolvedSection:
    """A section definition together with its rendered fragment HTML."""

    definition: SectionDefinition
    rendered_content: str

    @property
    def name(self) -> str:
        return self.definition.name

    def to_payload(self) -> dict[str, str]:
        payload = self.definition.to_payload()
        payload["renderedContent"] = self.rendered_content
        return payload


@dc.dataclass(frozen=True, slots=True)
class ThemeConfig:
    """User overrides applied to the design-system stylesheet."""

    primary_color: str = DEFAULT_PRIMARY_COLOR
    font_family: str = DEFAULT_FONT_FAMILY

    @classmethod
    def from_payload(
        cls,
        data: typ.Mapping[str, typ.Any] | None,
        *,
        defaults: ThemeConfig | None = None,
    ) -> ThemeConfig:
        """Merge a request ``bootstrapConfig`` object over ``defaults``.

        Missing, ``null``, and blank fields keep the default value.
        """
        base = defaults or cls()
        if not data:
            return base
        return cls(
            primary_color=_optional_str(data.get("primaryColor")) or base.primary_color,
            font_family=_optional_str(data.get("fontFamily")) or base.font_family,
        )

    def to_payload(self) -> dict[str, str]:
        return {"primaryColor": self.primary_color, "fontFamily": self.font_family}


@dc.dataclass(frozen=True, slots=True)
class BuildRequest:
    """Input to one build; section order decides fragment order."""

    sections: tuple[str, ...]
    theme: ThemeConfig = dc.field(default_factory=ThemeConfig)

    @classmethod
    def create(
        cls, sections: typ.Iterable[str], theme: ThemeConfig | None = None
    ) -> BuildRequest:
        return cls(sections=tuple(sections), theme=theme or ThemeConfig())


@dc.dataclass(frozen=True, slots=True)
class BuildResult:
    """Metadata for one completed build, persisted as ``meta.json``."""

    id: str
    output_path: str
    sections: tuple[ResolvedSection, ...]
    footer_text: str
    theme: ThemeConfig

    def to_payload(self) -> dict[str, typ.Any]:
        return {
            "id": self.id,
            "outputPath": self.output_path,
            "sections": [section.to_payload() for section in self.sections],
            "footerText": self.footer_text,
            "themeConfig": self.theme.to_payload(),
        }


@dc.dataclass(frozen=True, slots=True)
class SiteLogEntry:
    """One record in the global site log.

    ``sections`` holds the names exactly as requested, including names the
    catalog did not resolve.
    """

    id: str
    output_path: str
    timestamp: dt.datetime
    sections: tuple[str, ...]
    theme: ThemeConfig

    @classmethod
    def from_mapping(cls, data: typ.Mapping[str, typ.Any]) -> SiteLogEntry:
        raw_timestamp = str(data["timestamp"])
        if raw_timestamp.endswith("Z"):
            raw_timestamp = raw_timestamp[:-1] + "+00:00"
        return cls(
            id=str(data["id"]),
            output_path=str(data["outputPath"]),
            timestamp=dt.datetime.fromisoformat(raw_timestamp),
            sections=tuple(str(name) for name in data.get("sections") or ()),
            theme=ThemeConfig.from_payload(data.get("themeConfig")),
        )

    def to_payload(self) -> dict[str, typ.Any]:
        timestamp = self.timestamp.astimezone(dt.UTC)
        return {
            "id": self.id,
            "outputPath": self.output_path,
            "timestamp": timestamp.isoformat().replace("+00:00", "Z"),
            "sections": list(self.sections),
            "themeConfig": self.theme.to_payload(),
        }


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


__all__ = [
    "BuildRequest",
    "BuildResult",
    "ResolvedSection",
    "SectionDefinition",
    "SiteLogEntry",
    "ThemeConfig",
]
