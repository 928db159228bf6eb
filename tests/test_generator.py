"""
tests/test_generator.py
End-to-end tests for entigen.generator.WorkflowCompiler.

Every test compiles into a pytest-managed temporary directory and checks
the report, the state history and what is (or is not) left on disk.
"""

from __future__ import annotations

import json
import logging
import pathlib
from typing import Any, Dict, List, Sequence

import pytest

from entigen.exporters import ArtifactExporter
from entigen.generator import (
    CompilerState,
    WorkflowCompiler,
    load_workflow_file,
    parse_raw_workflow,
)
from entigen.models import GenerationConfig
from entigen.resolver import ResolvedEntity
from entigen.templates import TemplateGenerator


def _disk_entries(root: pathlib.Path) -> List[pathlib.Path]:
    if not root.exists():
        return []
    return list(root.iterdir())


# ===========================================================================
# Loading and parsing
# ===========================================================================


class TestLoading:
    """File loading and config layering."""

    def test_load_yaml(self, workflow_yaml_path: pathlib.Path) -> None:
        raw = load_workflow_file(workflow_yaml_path)
        assert raw["name"] == "Shop"

    def test_load_json(self, shop_dict: Dict[str, Any], tmp_path: pathlib.Path) -> None:
        path = tmp_path / "shop.json"
        path.write_text(json.dumps(shop_dict), encoding="utf-8")
        assert load_workflow_file(path) == shop_dict

    def test_missing_file(self, tmp_path: pathlib.Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_workflow_file(tmp_path / "nope.yaml")

    def test_invalid_json(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError):
            load_workflow_file(path)

    def test_config_layering(self, workflow_dict: Dict[str, Any]) -> None:
        base = GenerationConfig(output_root="/base", default_page_size=5)
        workflow, config = parse_raw_workflow(
            workflow_dict, base, {"max_page_size": 80}
        )
        assert workflow.name == "Shop"
        assert config.output_root == "/base"
        assert config.default_page_size == 20
        assert config.max_page_size == 80

    def test_parse_error_keeps_pydantic_cause(self) -> None:
        with pytest.raises(ValueError) as exc_info:
            parse_raw_workflow({"name": "Shop", "workflows": "nope"})
        assert exc_info.value.__cause__ is not None


# ===========================================================================
# Successful compilation
# ===========================================================================


class TestCompileSuccess:
    """The happy path."""

    def test_shop_end_to_end(
        self, shop_dict: Dict[str, Any], generation_config: GenerationConfig
    ) -> None:
        report = WorkflowCompiler(generation_config).compile_raw(shop_dict)

        assert report.success, report.summary()
        assert report.state == CompilerState.DONE
        assert report.output_directory is not None
        assert report.manifest is not None
        assert report.total_entities == 2

        project = pathlib.Path(report.output_directory)
        assert project.name == "Shop"
        schema = (project / "prisma" / "schema.prisma").read_text(encoding="utf-8")
        assert "model User {" in schema
        assert "model Order {" in schema
        assert '@relation("OrderToUser"' in schema
        assert (project / "src" / "validators" / "user.validator.ts").is_file()
        assert not (project / "src" / "validators" / "order.validator.ts").exists()
        assert report.total_files == len(report.manifest.files)

    def test_state_history(
        self, shop_dict: Dict[str, Any], generation_config: GenerationConfig
    ) -> None:
        report = WorkflowCompiler(generation_config).compile_raw(shop_dict)
        assert report.state_history == [
            CompilerState.IDLE,
            CompilerState.VALIDATING,
            CompilerState.RESOLVING,
            CompilerState.GENERATING,
            CompilerState.MATERIALIZING,
            CompilerState.DONE,
        ]

    def test_reference_workflow_from_file(
        self, workflow_yaml_path: pathlib.Path, generation_config: GenerationConfig
    ) -> None:
        report = WorkflowCompiler(generation_config).compile_file(workflow_yaml_path)
        assert report.success, report.summary()
        assert report.total_entities == 5
        assert report.step_metrics[0].step_name == "Load Workflow File"

    def test_overrides_reach_generated_code(
        self, shop_yaml_path: pathlib.Path, generation_config: GenerationConfig
    ) -> None:
        report = WorkflowCompiler(generation_config).compile_file(
            shop_yaml_path, config_overrides={"default_page_size": 7}
        )
        assert report.success
        service = pathlib.Path(report.output_directory) / "src/services/user.service.ts"
        assert "take = '7'" in service.read_text(encoding="utf-8")

    def test_hooks_receive_entities_and_directory(
        self, shop_dict: Dict[str, Any], generation_config: GenerationConfig
    ) -> None:
        seen: Dict[str, Any] = {}

        def record(entities: Sequence[ResolvedEntity], directory: pathlib.Path) -> None:
            seen["names"] = [e.name for e in entities]
            seen["schema_exists"] = (directory / "prisma" / "schema.prisma").is_file()

        report = WorkflowCompiler(generation_config, hooks=[record]).compile_raw(shop_dict)
        assert report.success
        assert seen == {"names": ["user", "order"], "schema_exists": True}

    def test_separate_compilations_do_not_collide(
        self, shop_dict: Dict[str, Any], generation_config: GenerationConfig
    ) -> None:
        compiler = WorkflowCompiler(generation_config)
        first = compiler.compile_raw(shop_dict)
        second = compiler.compile_raw(shop_dict)
        assert first.success and second.success
        assert first.output_directory != second.output_directory


# ===========================================================================
# Failed compilation
# ===========================================================================


class TestCompileFailure:
    """Every failure ends in Failed with nothing left on disk."""

    def test_validation_errors_write_nothing(
        self,
        duplicate_entity_dict: Dict[str, Any],
        generation_config: GenerationConfig,
        output_root: pathlib.Path,
    ) -> None:
        report = WorkflowCompiler(generation_config).compile_raw(duplicate_entity_dict)

        assert not report.success
        assert report.state == CompilerState.FAILED
        assert report.error_codes == ["DUPLICATE_ENTITY_NAME"]
        assert report.output_directory is None
        assert _disk_entries(output_root) == []
        assert report.state_history == [
            CompilerState.IDLE,
            CompilerState.VALIDATING,
            CompilerState.FAILED,
        ]

    def test_ownership_cycle_rejected(
        self, ownership_cycle_dict: Dict[str, Any], generation_config: GenerationConfig
    ) -> None:
        report = WorkflowCompiler(generation_config).compile_raw(ownership_cycle_dict)
        assert report.error_codes == ["CIRCULAR_OWNERSHIP"]

    def test_shape_error_is_invalid_input(
        self, generation_config: GenerationConfig
    ) -> None:
        report = WorkflowCompiler(generation_config).compile_raw(
            {"name": "Shop", "workflows": [{"name": "user", "props": [{"name": "age"}]}]}
        )
        assert not report.success
        assert set(report.error_codes) == {"INVALID_INPUT"}
        assert report.validation_errors[0].entity == "user"

    def test_missing_file_is_input_error(
        self, tmp_path: pathlib.Path, generation_config: GenerationConfig
    ) -> None:
        report = WorkflowCompiler(generation_config).compile_file(tmp_path / "missing.yaml")
        assert not report.success
        assert report.input_errors
        assert report.state == CompilerState.FAILED

    def test_io_failure_rolls_back(
        self,
        shop_dict: Dict[str, Any],
        generation_config: GenerationConfig,
        output_root: pathlib.Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        calls = {"count": 0}

        def failing_write(target_path: pathlib.Path, data: bytes) -> None:
            calls["count"] += 1
            if calls["count"] == 3:
                raise OSError("disk full")
            target_path.write_bytes(data)

        monkeypatch.setattr(ArtifactExporter, "_atomic_write", staticmethod(failing_write))
        report = WorkflowCompiler(generation_config).compile_raw(shop_dict)

        assert not report.success
        assert report.state == CompilerState.FAILED
        assert report.generation_errors
        assert report.output_directory is None
        assert _disk_entries(output_root) == []

    def test_failing_hook_rolls_back(
        self,
        shop_dict: Dict[str, Any],
        generation_config: GenerationConfig,
        output_root: pathlib.Path,
    ) -> None:
        def explode(entities: Sequence[ResolvedEntity], directory: pathlib.Path) -> None:
            raise RuntimeError("downstream unavailable")

        report = WorkflowCompiler(generation_config, hooks=[explode]).compile_raw(shop_dict)

        assert not report.success
        assert any("explode" in e for e in report.generation_errors)
        assert report.manifest is None
        assert _disk_entries(output_root) == []

    def test_generator_defect_is_internal_error(
        self,
        shop_dict: Dict[str, Any],
        generation_config: GenerationConfig,
        output_root: pathlib.Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        def broken(self: TemplateGenerator, entities: Sequence[ResolvedEntity]) -> Dict[str, str]:
            raise KeyError("template")

        monkeypatch.setattr(TemplateGenerator, "generate_all", broken)
        report = WorkflowCompiler(generation_config).compile_raw(shop_dict)

        assert not report.success
        assert report.internal_errors
        assert not report.validation_errors
        assert report.state_history[-2:] == [CompilerState.GENERATING, CompilerState.FAILED]
        assert _disk_entries(output_root) == []

    def test_unencodable_rule_value_is_invalid_input(
        self, generation_config: GenerationConfig, output_root: pathlib.Path
    ) -> None:
        report = WorkflowCompiler(generation_config).compile_raw(
            {
                "name": "Shop",
                "workflows": [
                    {
                        "name": "user",
                        "props": [
                            {
                                "name": "status",
                                "type": "string",
                                "validation": [{"type": "enum", "values": ["ok", "\ud800"]}],
                            }
                        ],
                    }
                ],
            }
        )

        assert not report.success
        assert report.error_codes == ["INVALID_INPUT"]
        assert _disk_entries(output_root) == []

    def test_unencodable_artifact_fails_before_any_write(
        self,
        shop_dict: Dict[str, Any],
        generation_config: GenerationConfig,
        output_root: pathlib.Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        def render(self: TemplateGenerator, entities: Sequence[ResolvedEntity]) -> Dict[str, str]:
            return {"prisma/schema.prisma": "ok\n", "src/types/user.ts": "bad \udc80\n"}

        monkeypatch.setattr(TemplateGenerator, "generate_all", render)
        report = WorkflowCompiler(generation_config).compile_raw(shop_dict)

        assert not report.success
        assert report.internal_errors
        assert report.state_history[-2:] == [CompilerState.GENERATING, CompilerState.FAILED]
        assert _disk_entries(output_root) == []

    def test_cleanup_failure_does_not_mask_write_error(
        self,
        shop_dict: Dict[str, Any],
        generation_config: GenerationConfig,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        def failing_write(target_path: pathlib.Path, data: bytes) -> None:
            raise OSError("disk full")

        def failing_rmtree(path: Any, *args: Any, **kwargs: Any) -> None:
            raise OSError("device busy")

        monkeypatch.setattr(ArtifactExporter, "_atomic_write", staticmethod(failing_write))
        monkeypatch.setattr("entigen.exporters.shutil.rmtree", failing_rmtree)

        with caplog.at_level(logging.ERROR, logger="entigen"):
            report = WorkflowCompiler(generation_config).compile_raw(shop_dict)

        assert not report.success
        assert report.state == CompilerState.FAILED
        assert len(report.generation_errors) == 1
        assert "disk full" in report.generation_errors[0]
        assert report.output_directory is None
        assert any(
            "Could not remove output container" in rec.getMessage() for rec in caplog.records
        )

    def test_summary_mentions_errors(
        self, dangling_relation_dict: Dict[str, Any], generation_config: GenerationConfig
    ) -> None:
        report = WorkflowCompiler(generation_config).compile_raw(dangling_relation_dict)
        summary = report.summary()
        assert "FAILED" in summary
        assert "UNKNOWN_RELATION_TARGET" in summary
