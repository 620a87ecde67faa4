"""Tests for declared pipeline stages."""

from __future__ import annotations

import typing as typ

import pytest

from sitesmith.pipeline import BuildPipeline, BuildState, PipelineDefinitionError, Stage
from sitesmith.pipeline.orchestrator import PIPELINE_INPUTS, BuildOrchestrator


def _stage(
    name: str, inputs: tuple[str, ...], outputs: tuple[str, ...], **kwargs: typ.Any
) -> Stage:
    return Stage(
        name=name,
        inputs=inputs,
        outputs=outputs,
        run=lambda *_args: {key: name for key in outputs},
        reached=BuildState.HTML_WRITTEN,
        **kwargs,
    )


def test_stage_inputs_must_be_produced_earlier() -> None:
    stages = [
        _stage("optimize", ("css", "html"), ("css",)),
        _stage("html", (), ("html",)),
        _stage("theme", (), ("css",)),
    ]
    with pytest.raises(PipelineDefinitionError, match="optimize"):
        BuildPipeline(stages, initial=())


def test_initial_artifacts_satisfy_inputs() -> None:
    stage = _stage("html", ("sections",), ("html",))
    pipeline = BuildPipeline([stage], initial=["sections"])
    assert len(pipeline) == 1


def test_written_artifact_must_be_an_output() -> None:
    with pytest.raises(PipelineDefinitionError, match="writes 'css'"):
        BuildPipeline(
            [_stage("html", (), ("html",), writes=("css", "css/style.min.css"))],
            initial=(),
        )


def test_run_stage_merges_outputs() -> None:
    pipeline = BuildPipeline(
        [_stage("theme", (), ("css",)), _stage("optimize", ("css",), ("css",))],
        initial=(),
    )
    artifacts: dict[str, str] = {}
    for stage in pipeline:
        pipeline.run_stage(stage, artifacts)
    assert artifacts == {"css": "optimize"}


def test_run_stage_rejects_missing_outputs() -> None:
    stage = Stage(
        name="html",
        inputs=(),
        outputs=("html",),
        run=lambda: {},
        reached=BuildState.HTML_WRITTEN,
    )
    pipeline = BuildPipeline([stage], initial=())
    with pytest.raises(PipelineDefinitionError, match="did not produce html"):
        pipeline.run_stage(stage, {})


def test_builder_optimizes_after_html_and_scripts(builder_config) -> None:
    pipeline = BuildOrchestrator(builder_config).pipeline
    names = [stage.name for stage in pipeline]
    assert names == ["html", "theme", "scripts", "optimize"]
    assert set(PIPELINE_INPUTS) == {"sections", "theme", "title", "year"}
