"""Declared pipeline stages and the build state machine.

Each stage names the artifacts it reads and the artifacts it produces. A
:class:`BuildPipeline` checks, when it is constructed, that every input of
every stage is produced by an earlier stage (or supplied up front), so the
ordering constraint "optimize CSS only after HTML and JS exist" is enforced by
the declaration rather than by call order.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import enum
import typing as typ


class BuildState(enum.Enum):
    """Lifecycle of one build request."""

    STARTED = "started"
    ID_GENERATED = "id_generated"
    DIR_CREATED = "dir_created"
    HTML_WRITTEN = "html_written"
    CSS_COMPILED = "css_compiled"
    JS_BUNDLED = "js_bundled"
    CSS_OPTIMIZED = "css_optimized"
    META_WRITTEN = "meta_written"
    LOG_APPENDED = "log_appended"
    DONE = "done"
    FAILED = "failed"


class PipelineDefinitionError(ValueError):
    """Raised when stages are declared in an order that cannot run."""


@dc.dataclass(frozen=True, slots=True)
class Stage:
    """One pipeline step.

    Attributes
    ----------
    name : str
        Identifier used in logs.
    inputs : tuple[str, ...]
        Artifact keys passed positionally to ``run``.
    outputs : tuple[str, ...]
        Keys of the mapping ``run`` returns. Re-declaring an existing key
        replaces that artifact.
    run : Callable
        Stage body.
    reached : BuildState
        State entered once the stage and its write have finished.
    writes : tuple[str, str] | None
        ``(artifact key, path relative to the site directory)`` persisted
        after the stage runs.
    """

    name: str
    inputs: tuple[str, ...]
    outputs: tuple[str, ...]
    run: cabc.Callable[..., cabc.Mapping[str, typ.Any]]
    reached: BuildState
    writes: tuple[str, str] | None = None


class BuildPipeline:
    """An ordered, dependency-checked sequence of stages."""

    def __init__(
        self, stages: cabc.Iterable[Stage], *, initial: cabc.Iterable[str]
    ) -> None:
        self.stages = tuple(stages)
        self.initial = frozenset(initial)
        available = set(self.initial)
        for stage in self.stages:
            missing = [key for key in stage.inputs if key not in available]
            if missing:
                msg = (
                    f"Stage '{stage.name}' needs {', '.join(missing)} "
                    "before any earlier stage produces it."
                )
                raise PipelineDefinitionError(msg)
            if stage.writes and stage.writes[0] not in stage.outputs:
                msg = (
                    f"Stage '{stage.name}' writes '{stage.writes[0]}' "
                    "without producing it."
                )
                raise PipelineDefinitionError(msg)
            available.update(stage.outputs)

    def __iter__(self) -> cabc.Iterator[Stage]:
        return iter(self.stages)

    def __len__(self) -> int:
        return len(self.stages)

    def run_stage(
        self, stage: Stage, artifacts: cabc.MutableMapping[str, typ.Any]
    ) -> None:
        """Run ``stage`` against ``artifacts`` and merge its outputs in place."""
        produced = stage.run(*(artifacts[key] for key in stage.inputs))
        missing = [key for key in stage.outputs if key not in produced]
        if missing:
            msg = f"Stage '{stage.name}' did not produce {', '.join(missing)}."
            raise PipelineDefinitionError(msg)
        for key in stage.outputs:
            artifacts[key] = produced[key]


__all__ = ["BuildPipeline", "BuildState", "PipelineDefinitionError", "Stage"]
