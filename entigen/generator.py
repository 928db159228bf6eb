# File: entigen/generator.py
"""
Entigen - Workflow Compiler (Orchestrator)
===========================================

Connects every phase of a compilation:

    Workflow input → Validation → Relation resolution → Generation → Export

The ``WorkflowCompiler`` class provides both a programmatic API and the
backend for the CLI.

Workflow::

    1. Load the workflow from a JSON/YAML file (or accept a dict / model).
    2. Parse into ``Workflow`` + ``GenerationConfig`` (models.py).
    3. Run the full validation pipeline (validators.py).
    4. Resolve relations into ``ResolvedEntity`` records (resolver.py).
    5. Render every artifact (templates.py).
    6. Write them into a fresh container directory (exporters.py).
    7. Run downstream hooks with the resolved entities and the directory.
    8. Return a ``CompilationReport`` with state history and metrics.

Error handling strategy:
    - Validation problems are collected and returned, never raised.
    - Resolution and rendering faults are internal defects, recorded
      separately from user-facing errors.
    - I/O failures roll back the whole container; a report never names an
      output directory that is incomplete.

State machine::

    Idle → Validating → Resolving → Generating → Materializing → Done
                 ↘            ↘            ↘              ↘
                                 Failed
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

import pydantic
import yaml

from entigen.errors import GeneratorDefect, MaterializationError
from entigen.exporters import ArtifactExporter, ExportManifest, ExportResult
from entigen.models import GenerationConfig, Workflow
from entigen.resolver import ResolvedEntity, resolve_relations
from entigen.templates import TemplateGenerator
from entigen.utils import Timer, count_lines
from entigen.validators import (
    ValidationIssue,
    ValidationResult,
    result_from_parse_error,
    validate_full,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("entigen.generator")

# Downstream collaborator: receives the resolved entities and the project
# directory once every artifact is on disk.
CompilationHook = Callable[[Sequence[ResolvedEntity], Path], None]


# ---------------------------------------------------------------------------
# Compilation report
# ---------------------------------------------------------------------------


class CompilerState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    RESOLVING = "resolving"
    GENERATING = "generating"
    MATERIALIZING = "materializing"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=False, slots=True)
class GenerationStepMetric:
    """Timing and outcome for a single pipeline step."""

    step_name: str = ""
    success: bool = True
    elapsed_seconds: float = 0.0
    detail: str = ""


@dataclass(frozen=False, slots=True)
class CompilationReport:
    """
    Everything one compilation produced.

    ``output_directory`` is set only when the compilation reached ``Done``;
    on failure nothing is left on disk.
    """

    success: bool = False
    state: CompilerState = CompilerState.IDLE
    state_history: List[CompilerState] = field(
        default_factory=lambda: [CompilerState.IDLE]
    )
    project_name: str = ""
    output_directory: Optional[str] = None
    container_directory: Optional[str] = None

    # Metrics
    total_files: int = 0
    total_bytes: int = 0
    total_lines: int = 0
    total_entities: int = 0
    total_elapsed_seconds: float = 0.0

    # Sub-reports
    step_metrics: List[GenerationStepMetric] = field(default_factory=list)
    input_errors: List[str] = field(default_factory=list)
    validation_errors: List[ValidationIssue] = field(default_factory=list)
    validation_warnings: List[ValidationIssue] = field(default_factory=list)
    generation_errors: List[str] = field(default_factory=list)
    internal_errors: List[str] = field(default_factory=list)

    resolved_entities: List[ResolvedEntity] = field(default_factory=list)
    manifest: Optional[ExportManifest] = None

    @property
    def error_codes(self) -> List[str]:
        return [issue.code for issue in self.validation_errors]

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        status: str = "SUCCESS" if self.success else "FAILED"
        lines.append("=" * 60)
        lines.append("  Entigen: Compilation Report")
        lines.append("=" * 60)
        lines.append(f"  Status:           {status} ({self.state.value})")
        lines.append(f"  Project:          {self.project_name}")
        lines.append(f"  Output:           {self.output_directory or '-'}")
        lines.append(f"  Entities:         {self.total_entities}")
        lines.append(f"  Files generated:  {self.total_files}")
        lines.append(f"  Total lines:      {self.total_lines:,}")
        lines.append(f"  Total bytes:      {self.total_bytes:,}")
        lines.append(f"  Total time:       {self.total_elapsed_seconds:.3f}s")
        lines.append("-" * 60)

        if self.step_metrics:
            lines.append("  Pipeline Steps:")
            for step in self.step_metrics:
                icon: str = "✓" if step.success else "✗"
                lines.append(
                    f"    {icon} {step.step_name:<24s} "
                    f"{step.elapsed_seconds:>7.3f}s  {step.detail}"
                )

        sections: Tuple[Tuple[str, str, List[str]], ...] = (
            ("Input Errors", "✗", self.input_errors),
            ("Validation Errors", "✗", [str(e) for e in self.validation_errors]),
            ("Validation Warnings", "⚠", [str(w) for w in self.validation_warnings]),
            ("Generation Errors", "✗", self.generation_errors),
            ("Internal Errors", "✗", self.internal_errors),
        )
        for title, icon, entries in sections:
            if not entries:
                continue
            lines.append("-" * 60)
            lines.append(f"  {title} ({len(entries)}):")
            for entry in entries:
                lines.append(f"    {icon} {entry}")

        lines.append("=" * 60)
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Workflow loader helpers
# ---------------------------------------------------------------------------


def _load_json_file(path: Path) -> Dict[str, Any]:
    """Load and parse a JSON file. Raises ValueError on parse errors."""
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a JSON object at top level, got {type(data).__name__}."
        )
    return data


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML file. Raises ValueError on parse errors."""
    try:
        data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a YAML mapping at top level, got {type(data).__name__}."
        )
    return data


def load_workflow_file(path: Path) -> Dict[str, Any]:
    """
    Load a workflow file (JSON or YAML), dispatching on the extension.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file can't be parsed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Workflow file not found: {path}")
    if not path.is_file():
        raise ValueError(f"Workflow path is not a file: {path}")

    suffix: str = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _load_yaml_file(path)
    if suffix == ".json":
        return _load_json_file(path)

    logger.info("Unknown extension '%s': trying JSON then YAML.", suffix)
    try:
        return _load_json_file(path)
    except ValueError:
        return _load_yaml_file(path)


def parse_raw_workflow(
    raw: Mapping[str, Any],
    base_config: Optional[GenerationConfig] = None,
    config_overrides: Optional[Mapping[str, Any]] = None,
) -> Tuple[Workflow, GenerationConfig]:
    """
    Parse a raw mapping into a ``Workflow`` and its ``GenerationConfig``.

    The optional top-level ``config`` mapping is layered over
    *base_config*; *config_overrides* win over both.

    Raises:
        ValueError: If the input does not have the expected shape.  When
            pydantic rejected it, the ``pydantic.ValidationError`` is the
            ``__cause__``.
    """
    if not isinstance(raw, Mapping):
        raise ValueError(f"Expected a mapping at top level, got {type(raw).__name__}.")

    workflow_data: Dict[str, Any] = {k: v for k, v in raw.items() if k != "config"}
    config_data: Dict[str, Any] = (
        base_config.model_dump() if base_config is not None else {}
    )
    file_config: Any = raw.get("config") or {}
    if not isinstance(file_config, Mapping):
        raise ValueError(
            f"'config' must be a mapping, got {type(file_config).__name__}."
        )
    config_data.update(file_config)
    if config_overrides:
        config_data.update(config_overrides)

    try:
        workflow: Workflow = Workflow.model_validate(workflow_data)
    except pydantic.ValidationError as exc:
        raise ValueError(f"Workflow validation failed: {exc}") from exc

    try:
        config: GenerationConfig = GenerationConfig.model_validate(config_data)
    except pydantic.ValidationError as exc:
        raise ValueError(f"Config validation failed: {exc}") from exc

    return workflow, config


# ---------------------------------------------------------------------------
# WorkflowCompiler: master orchestrator
# ---------------------------------------------------------------------------


class WorkflowCompiler:
    """
    Compiles workflows into generated projects.

    Usage::

        compiler = WorkflowCompiler(GenerationConfig(output_root="./out"))

        report = compiler.compile_file(Path("shop.yaml"))
        report = compiler.compile_raw({"name": "Shop", "workflows": [...]})
        report = compiler.compile(workflow)

        print(report.summary())

    The compiler holds only its default config and hooks; every call
    allocates its own output container, so one instance can serve
    concurrent requests.
    """

    def __init__(
        self,
        config: Optional[GenerationConfig] = None,
        hooks: Sequence[CompilationHook] = (),
    ) -> None:
        self._config: GenerationConfig = config or GenerationConfig()
        self._hooks: List[CompilationHook] = list(hooks)
        logger.debug(
            "WorkflowCompiler initialised: output_root=%s, hooks=%d.",
            self._config.output_root,
            len(self._hooks),
        )

    @property
    def config(self) -> GenerationConfig:
        return self._config

    def add_hook(self, hook: CompilationHook) -> None:
        """Register a downstream collaborator run after a successful export."""
        self._hooks.append(hook)

    # -----------------------------------------------------------------
    # Public: compile from file / raw mapping
    # -----------------------------------------------------------------

    def compile_file(
        self,
        path: Path,
        *,
        config_overrides: Optional[Mapping[str, Any]] = None,
    ) -> CompilationReport:
        """Full pipeline: load file → parse → compile."""
        with Timer("load_workflow") as t_load:
            try:
                raw: Dict[str, Any] = load_workflow_file(Path(path))
            except (FileNotFoundError, ValueError) as exc:
                load_error: str = str(exc)
            else:
                load_error = ""

        if load_error:
            report: CompilationReport = CompilationReport()
            report.input_errors.append(load_error)
            report.step_metrics.append(GenerationStepMetric(
                step_name="Load Workflow File",
                success=False,
                elapsed_seconds=t_load.elapsed,
                detail=load_error,
            ))
            logger.error("Could not load %s: %s", path, load_error)
            self._transition(report, CompilerState.FAILED)
            return self._finalise_report(report, t_load.elapsed)

        logger.info("Loaded workflow file: %s (%d top-level keys).", path, len(raw))
        report = self.compile_raw(raw, config_overrides=config_overrides)
        report.step_metrics.insert(0, GenerationStepMetric(
            step_name="Load Workflow File",
            success=True,
            elapsed_seconds=t_load.elapsed,
            detail=f"from {Path(path).name}",
        ))
        report.total_elapsed_seconds += t_load.elapsed
        return report

    def compile_raw(
        self,
        raw: Mapping[str, Any],
        *,
        config_overrides: Optional[Mapping[str, Any]] = None,
    ) -> CompilationReport:
        """
        Parse a JSON-shaped mapping, then compile it.  Shape errors end the
        compilation in ``Failed`` with ``INVALID_INPUT`` validation errors.
        """
        with Timer("parse_workflow") as t_parse:
            try:
                workflow, config = parse_raw_workflow(raw, self._config, config_overrides)
            except ValueError as exc:
                parse_error: Optional[ValueError] = exc
            else:
                parse_error = None

        if parse_error is not None:
            report: CompilationReport = CompilationReport()
            if isinstance(raw, Mapping) and isinstance(raw.get("name"), str):
                report.project_name = raw["name"]
            self._transition(report, CompilerState.VALIDATING)

            cause: Optional[BaseException] = parse_error.__cause__
            if isinstance(cause, pydantic.ValidationError):
                issues: ValidationResult = result_from_parse_error(
                    cause, raw if isinstance(raw, Mapping) else None
                )
            else:
                issues = ValidationResult()
                issues.add_error("INVALID_INPUT", str(parse_error))
            report.validation_errors.extend(issues.errors)
            report.step_metrics.append(GenerationStepMetric(
                step_name="Parse Workflow",
                success=False,
                elapsed_seconds=t_parse.elapsed,
                detail=f"{issues.error_count} error(s)",
            ))
            logger.error("Workflow input rejected: %s", issues.summary())
            self._transition(report, CompilerState.FAILED)
            return self._finalise_report(report, t_parse.elapsed)

        report = self.compile(workflow, config)
        report.step_metrics.insert(0, GenerationStepMetric(
            step_name="Parse Workflow",
            success=True,
            elapsed_seconds=t_parse.elapsed,
            detail=f"{len(workflow.entities)} entities parsed",
        ))
        report.total_elapsed_seconds += t_parse.elapsed
        return report

    # -----------------------------------------------------------------
    # Public: compile an in-memory workflow
    # -----------------------------------------------------------------

    def compile(
        self,
        workflow: Workflow,
        config: Optional[GenerationConfig] = None,
    ) -> CompilationReport:
        """
        Compile a parsed workflow.

        Args:
            workflow: Input model; never modified.
            config: Per-request settings, defaulting to the compiler's.

        Returns:
            CompilationReport.  Never raises for user errors or I/O
            failures.
        """
        report: CompilationReport = CompilationReport(project_name=workflow.name)
        return self._run_pipeline(workflow, config or self._config, report)

    # -----------------------------------------------------------------
    # Internal: master pipeline
    # -----------------------------------------------------------------

    def _run_pipeline(
        self,
        workflow: Workflow,
        config: GenerationConfig,
        report: CompilationReport,
    ) -> CompilationReport:
        pipeline_start: float = time.perf_counter()

        self._transition(report, CompilerState.VALIDATING)
        if not self._step_validate(workflow, report):
            self._transition(report, CompilerState.FAILED)
            return self._finalise_report(report, time.perf_counter() - pipeline_start)

        export_result: Optional[ExportResult] = None
        try:
            self._transition(report, CompilerState.RESOLVING)
            entities: List[ResolvedEntity] = self._step_resolve(workflow, report)

            self._transition(report, CompilerState.GENERATING)
            generated_files: Dict[str, str] = self._step_generate(entities, config, report)

            self._transition(report, CompilerState.MATERIALIZING)
            exporter: ArtifactExporter = ArtifactExporter(config)
            export_result = self._step_export(
                exporter, workflow.name, generated_files, report
            )
            self._step_hooks(exporter, entities, export_result, report)

        except GeneratorDefect as exc:
            report.internal_errors.append(str(exc))
            logger.error("Internal generator defect: %s", exc, exc_info=True)
            self._transition(report, CompilerState.FAILED)
            return self._finalise_report(report, time.perf_counter() - pipeline_start)

        except MaterializationError as exc:
            report.generation_errors.append(str(exc))
            logger.error("Materialization failed: %s", exc)
            self._transition(report, CompilerState.FAILED)
            return self._finalise_report(report, time.perf_counter() - pipeline_start)

        report.output_directory = str(export_result.project_directory)
        report.container_directory = str(export_result.container_directory)
        self._transition(report, CompilerState.DONE)
        return self._finalise_report(report, time.perf_counter() - pipeline_start)

    def _transition(self, report: CompilationReport, state: CompilerState) -> None:
        logger.debug("State %s → %s", report.state.value, state.value)
        report.state = state
        report.state_history.append(state)

    # -----------------------------------------------------------------
    # Pipeline step: Validation
    # -----------------------------------------------------------------

    def _step_validate(self, workflow: Workflow, report: CompilationReport) -> bool:
        """Run the full validation pipeline. Returns True when there are no errors."""
        with Timer("validation") as t:
            result: ValidationResult = validate_full(workflow)

        report.validation_errors.extend(result.errors)
        report.validation_warnings.extend(result.warnings)

        if result.has_errors:
            detail: str = f"{result.error_count} error(s)"
        elif result.warning_count:
            detail = f"{result.warning_count} warning(s)"
        else:
            detail = "all checks passed"

        report.step_metrics.append(GenerationStepMetric(
            step_name="Validate Workflow",
            success=result.is_valid,
            elapsed_seconds=t.elapsed,
            detail=detail,
        ))

        if result.has_errors:
            logger.error(
                "Validation failed with %d error(s) in %.3fs.",
                result.error_count,
                t.elapsed,
            )
            for err in result.errors:
                logger.error("  ✗ %s", err)
            return False

        for warn in result.warnings:
            logger.warning("  ⚠ %s", warn)
        logger.info(
            "Validation passed: %d entities validated in %.3fs.",
            len(workflow.entities),
            t.elapsed,
        )
        return True

    # -----------------------------------------------------------------
    # Pipeline step: Relation resolution
    # -----------------------------------------------------------------

    def _step_resolve(
        self, workflow: Workflow, report: CompilationReport
    ) -> List[ResolvedEntity]:
        with Timer("resolution") as t:
            try:
                entities: List[ResolvedEntity] = resolve_relations(workflow)
            except Exception as exc:
                report.step_metrics.append(GenerationStepMetric(
                    step_name="Resolve Relations",
                    success=False,
                    elapsed_seconds=t.elapsed,
                    detail=type(exc).__name__,
                ))
                raise GeneratorDefect(
                    f"Relation resolution failed: {type(exc).__name__}: {exc}"
                ) from exc

        report.resolved_entities = entities
        report.total_entities = len(entities)
        synthesized: int = sum(len(e.synthesized_fields) for e in entities)
        report.step_metrics.append(GenerationStepMetric(
            step_name="Resolve Relations",
            success=True,
            elapsed_seconds=t.elapsed,
            detail=f"{len(entities)} entities, {synthesized} synthesized field(s)",
        ))
        return entities

    # -----------------------------------------------------------------
    # Pipeline step: Artifact generation
    # -----------------------------------------------------------------

    def _step_generate(
        self,
        entities: Sequence[ResolvedEntity],
        config: GenerationConfig,
        report: CompilationReport,
    ) -> Dict[str, str]:
        """Render every artifact in memory; nothing touches the disk here."""
        with Timer("code_generation") as t:
            try:
                generated_files: Dict[str, str] = TemplateGenerator(config).generate_all(entities)
                # Every artifact must be writable before a container exists
                for content in generated_files.values():
                    content.encode("utf-8")
            except Exception as exc:
                report.step_metrics.append(GenerationStepMetric(
                    step_name="Generate Artifacts",
                    success=False,
                    elapsed_seconds=t.elapsed,
                    detail=type(exc).__name__,
                ))
                raise GeneratorDefect(
                    f"Artifact generation failed: {type(exc).__name__}: {exc}"
                ) from exc

        total_lines: int = sum(count_lines(c) for c in generated_files.values())
        detail_str: str = (
            f"{len(generated_files)} files, ~{total_lines:,} lines, "
            f"{len(entities)} entities"
        )
        report.step_metrics.append(GenerationStepMetric(
            step_name="Generate Artifacts",
            success=True,
            elapsed_seconds=t.elapsed,
            detail=detail_str,
        ))
        logger.info("Code generation complete: %s in %.3fs.", detail_str, t.elapsed)
        return generated_files

    # -----------------------------------------------------------------
    # Pipeline step: Export
    # -----------------------------------------------------------------

    def _step_export(
        self,
        exporter: ArtifactExporter,
        project_name: str,
        generated_files: Dict[str, str],
        report: CompilationReport,
    ) -> ExportResult:
        with Timer("export") as t:
            try:
                export_result: ExportResult = exporter.export(project_name, generated_files)
            except MaterializationError as exc:
                report.step_metrics.append(GenerationStepMetric(
                    step_name="Export to Filesystem",
                    success=False,
                    elapsed_seconds=t.elapsed,
                    detail=exc.path or "container",
                ))
                raise

        manifest: ExportManifest = export_result.manifest
        report.manifest = manifest
        report.total_files = manifest.total_files
        report.total_bytes = manifest.total_bytes
        report.total_lines = manifest.total_lines
        report.step_metrics.append(GenerationStepMetric(
            step_name="Export to Filesystem",
            success=True,
            elapsed_seconds=t.elapsed,
            detail=f"{manifest.total_files} files, {manifest.total_bytes:,} bytes",
        ))
        return export_result

    def _step_hooks(
        self,
        exporter: ArtifactExporter,
        entities: Sequence[ResolvedEntity],
        export_result: ExportResult,
        report: CompilationReport,
    ) -> None:
        """Run downstream hooks; a failing hook rolls the export back."""
        if not self._hooks:
            return

        with Timer("hooks") as t:
            for hook in self._hooks:
                hook_name: str = getattr(hook, "__name__", type(hook).__name__)
                try:
                    hook(tuple(entities), export_result.project_directory)
                except Exception as exc:
                    report.step_metrics.append(GenerationStepMetric(
                        step_name="Downstream Hooks",
                        success=False,
                        elapsed_seconds=t.elapsed,
                        detail=hook_name,
                    ))
                    exporter.discard(export_result.container_directory)
                    report.manifest = None
                    raise MaterializationError(
                        f"Hook '{hook_name}' failed: {type(exc).__name__}: {exc}"
                    ) from exc
                logger.debug("Hook '%s' completed.", hook_name)

        report.step_metrics.append(GenerationStepMetric(
            step_name="Downstream Hooks",
            success=True,
            elapsed_seconds=t.elapsed,
            detail=f"{len(self._hooks)} hook(s)",
        ))

    # -----------------------------------------------------------------
    # Internal: finalise report
    # -----------------------------------------------------------------

    def _finalise_report(
        self,
        report: CompilationReport,
        total_elapsed: float,
    ) -> CompilationReport:
        """Set final status and timing on the report."""
        report.total_elapsed_seconds = total_elapsed
        report.success = report.state == CompilerState.DONE and not (
            report.input_errors
            or report.validation_errors
            or report.generation_errors
            or report.internal_errors
        )
        if report.success:
            logger.info(
                "Compilation of '%s' finished: %d files in %.3fs.",
                report.project_name,
                report.total_files,
                total_elapsed,
            )
        return report


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "CompilationHook",
    "CompilerState",
    "CompilationReport",
    "GenerationStepMetric",
    "WorkflowCompiler",
    "load_workflow_file",
    "parse_raw_workflow",
]

logger.debug("entigen.generator loaded: %d public symbols.", len(__all__))
