"""High-level orchestration for one site build.

:class:`BuildOrchestrator` turns a :class:`~sitesmith.models.BuildRequest`
into a directory under ``dist/<site-id>/`` holding ``index.html``,
``css/style.min.css``, ``js/script.min.js`` and ``meta.json``, then records
the build in the site log. The HTML, theme, script and optimization steps are
declared as :class:`~sitesmith.pipeline.stages.Stage` objects, so the
optimizer provably runs after both of its inputs exist.

Any failure moves the build to ``FAILED``; no later step runs, the partially
written directory is removed (unless ``keep_failed_builds`` is set) and the
error propagates as a :class:`~sitesmith.errors.BuildError`.

Example
-------
>>> from pathlib import Path
>>> from sitesmith.config import BuilderConfig
>>> from sitesmith.models import BuildRequest
>>> config = BuilderConfig.default(Path("site"))
>>> orchestrator = BuildOrchestrator(config)  # doctest: +SKIP
>>> result = orchestrator.build(BuildRequest.create(["hero"]))  # doctest: +SKIP
>>> result.output_path  # doctest: +SKIP
'dist/1f3a9c0e/index.html'
"""

from __future__ import annotations

import datetime as dt
import json
import shutil
import typing as typ

from sitesmith._constants import (
    CSS_FILENAME,
    INDEX_FILENAME,
    JS_FILENAME,
    META_FILENAME,
    SITE_INDEX_TEMPLATE,
)
from sitesmith.errors import BuildError, FilesystemFailure, SiteIdCollision
from sitesmith.ids import generate_site_id
from sitesmith.log import get_logger
from sitesmith.models import BuildResult, SiteLogEntry
from sitesmith.registry import SectionRegistry
from sitesmith.sitelog import SiteLog

from .assembler import HtmlAssembler, footer_text
from .optimizer import CssOptimizer
from .scripts import ScriptBundler
from .stages import BuildPipeline, BuildState, Stage
from .theme import ThemeCompiler

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from sitesmith.config import BuilderConfig
    from sitesmith.models import BuildRequest, ThemeConfig

logger = get_logger(__name__)

PIPELINE_INPUTS = ("sections", "theme", "title", "year")


class BuildOrchestrator:
    """Run the build pipeline for one request at a time."""

    def __init__(
        self,
        config: BuilderConfig,
        *,
        site_log: SiteLog | None = None,
        id_factory: cabc.Callable[[int], str] = generate_site_id,
        clock: cabc.Callable[[], dt.datetime] | None = None,
    ) -> None:
        """Initialize collaborators from ``config``.

        Parameters
        ----------
        config : BuilderConfig
            Resolved configuration naming the site root, templates, design
            system and script asset.
        site_log : SiteLog, optional
            Log receiving one entry per successful build; defaults to the
            log under the site root.
        id_factory : Callable[[int], str], optional
            Produces site ids from the configured byte count.
        clock : Callable[[], datetime], optional
            Source of the current UTC time; used for the footer year and log
            timestamp.
        """
        self.config = config
        self.site_log = site_log or SiteLog(config.site_log_path)
        self._id_factory = id_factory
        self._clock = clock or (lambda: dt.datetime.now(dt.UTC))
        self.assembler = HtmlAssembler(config.templates_dir)
        self.theme_compiler = ThemeCompiler(config.design_system)
        self.script_bundler = ScriptBundler(config.script_asset)
        self.css_optimizer = CssOptimizer(config.optimizer.safelist)
        self.pipeline = BuildPipeline(self._stages(), initial=PIPELINE_INPUTS)
        self.states: list[BuildState] = []

    def build(self, request: BuildRequest) -> BuildResult:
        """Run every step for ``request`` and return the persisted metadata.

        Raises
        ------
        BuildError
            Any step failed; the message describes the first failure.
        """
        self.states = [BuildState.STARTED]
        site_id: str | None = None
        site_dir: Path | None = None
        try:
            site_id = self._id_factory(self.config.site_id_bytes)
            self._transition(BuildState.ID_GENERATED, site_id)
            site_dir = self._create_site_dir(site_id)
            self._transition(BuildState.DIR_CREATED, site_id)

            now = self._clock()
            artifacts: dict[str, typ.Any] = {
                "sections": request.sections,
                "theme": request.theme,
                "title": self.config.site_title,
                "year": now.year,
            }
            for stage in self.pipeline:
                self.pipeline.run_stage(stage, artifacts)
                if stage.writes:
                    key, relative = stage.writes
                    _write_text(site_dir / relative, artifacts[key])
                self._transition(stage.reached, site_id)

            output_path = SITE_INDEX_TEMPLATE.format(site_id=site_id)
            result = BuildResult(
                id=site_id,
                output_path=output_path,
                sections=tuple(artifacts["resolved_sections"]),
                footer_text=footer_text(self.config.site_title, now.year),
                theme=request.theme,
            )
            meta = json.dumps(result.to_payload(), indent=2, ensure_ascii=False)
            _write_text(site_dir / META_FILENAME, meta + "\n")
            self._transition(BuildState.META_WRITTEN, site_id)

            self.site_log.append(
                SiteLogEntry(
                    id=site_id,
                    output_path=output_path,
                    timestamp=self._clock(),
                    sections=request.sections,
                    theme=request.theme,
                )
            )
            self._transition(BuildState.LOG_APPENDED, site_id)
        except BuildError as exc:
            self._fail(exc, site_id, site_dir)
            raise
        except OSError as exc:
            error = FilesystemFailure(str(exc))
            self._fail(error, site_id, site_dir)
            raise error from exc
        except Exception as exc:
            error = BuildError(f"{exc.__class__.__name__}: {exc}")
            self._fail(error, site_id, site_dir)
            raise error from exc
        self._transition(BuildState.DONE, site_id)
        return result

    def _stages(self) -> list[Stage]:
        return [
            Stage(
                name="html",
                inputs=("sections", "title", "year"),
                outputs=("html", "resolved_sections"),
                run=self._render_html,
                reached=BuildState.HTML_WRITTEN,
                writes=("html", INDEX_FILENAME),
            ),
            Stage(
                name="theme",
                inputs=("theme",),
                outputs=("css",),
                run=self._compile_theme,
                reached=BuildState.CSS_COMPILED,
                writes=("css", CSS_FILENAME),
            ),
            Stage(
                name="scripts",
                inputs=(),
                outputs=("js",),
                run=self._bundle_scripts,
                reached=BuildState.JS_BUNDLED,
                writes=("js", JS_FILENAME),
            ),
            Stage(
                name="optimize",
                inputs=("css", "html", "js"),
                outputs=("css",),
                run=self._optimize_css,
                reached=BuildState.CSS_OPTIMIZED,
                writes=("css", CSS_FILENAME),
            ),
        ]

    def _render_html(
        self, names: tuple[str, ...], title: str, year: int
    ) -> dict[str, typ.Any]:
        registry = SectionRegistry.from_catalog(self.config.catalog_path)
        resolved = self.assembler.resolve(
            registry.lookup(names), title=title, year=year
        )
        html, sections = self.assembler.assemble(resolved, title, year=year)
        return {"html": html, "resolved_sections": sections}

    def _compile_theme(self, theme: ThemeConfig) -> dict[str, str]:
        return {"css": self.theme_compiler.compile(theme)}

    def _bundle_scripts(self) -> dict[str, str]:
        return {"js": self.script_bundler.bundle()}

    def _optimize_css(self, css: str, html: str, js: str) -> dict[str, str]:
        return {"css": self.css_optimizer.optimize(css, html, js)}

    def _create_site_dir(self, site_id: str) -> Path:
        if site_id in self.site_log.ids():
            msg = f"Site id '{site_id}' is already recorded in the site log."
            raise SiteIdCollision(msg)
        site_dir = self.config.dist_dir / site_id
        try:
            self.config.dist_dir.mkdir(parents=True, exist_ok=True)
            site_dir.mkdir()
        except FileExistsError as exc:
            msg = f"Output directory for site '{site_id}' already exists."
            raise SiteIdCollision(msg) from exc
        except OSError as exc:
            msg = f"Unable to create output directory '{site_dir}': {exc}"
            raise FilesystemFailure(msg) from exc
        return site_dir

    def _transition(self, state: BuildState, site_id: str | None) -> None:
        self.states.append(state)
        logger.info("build_state", state=state.value, site_id=site_id)

    def _fail(
        self, error: BuildError, site_id: str | None, site_dir: Path | None
    ) -> None:
        self.states.append(BuildState.FAILED)
        logger.error(
            "build_failed", site_id=site_id, kind=error.kind, error=str(error)
        )
        if site_dir is None or self.config.keep_failed_builds:
            return
        try:
            shutil.rmtree(site_dir)
        except OSError as exc:  # pragma: no cover - cleanup is best effort
            logger.warning("cleanup_failed", path=str(site_dir), error=str(exc))


def _write_text(path: Path, text: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        msg = f"Unable to write '{path}': {exc}"
        raise FilesystemFailure(msg) from exc


__all__ = ["PIPELINE_INPUTS", "BuildOrchestrator"]
