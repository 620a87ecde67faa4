"""Build pipeline stages and their orchestration."""

from .assembler import HtmlAssembler
from .optimizer import CssOptimizer
from .orchestrator import BuildOrchestrator
from .scripts import ScriptBundler
from .stages import BuildPipeline, BuildState, PipelineDefinitionError, Stage
from .theme import ThemeCompiler

__all__ = [
    "BuildOrchestrator",
    "BuildPipeline",
    "BuildState",
    "CssOptimizer",
    "HtmlAssembler",
    "PipelineDefinitionError",
    "ScriptBundler",
    "Stage",
    "ThemeCompiler",
]
