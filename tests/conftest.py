"""
tests/conftest.py
Shared fixtures for the entigen test suite.

No external mocking libraries are used; real file I/O is performed inside
temporary directories managed by pytest's tmp_path fixtures.
"""

from __future__ import annotations

import copy
import logging
import pathlib
from typing import Any, Dict, Iterator

import pytest
import yaml

from entigen.models import GenerationConfig


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

ROOT_DIR: pathlib.Path = pathlib.Path(__file__).resolve().parent.parent
WORKFLOW_EXAMPLE_PATH: pathlib.Path = ROOT_DIR / "workflow_example.yaml"


# ---------------------------------------------------------------------------
# Reference workflow fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def raw_workflow_dict() -> Dict[str, Any]:
    """Load the reference workflow_example.yaml once per session."""
    assert WORKFLOW_EXAMPLE_PATH.exists(), (
        f"Reference workflow not found at {WORKFLOW_EXAMPLE_PATH}. "
        "Make sure workflow_example.yaml is in the project root."
    )
    with open(WORKFLOW_EXAMPLE_PATH, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    assert isinstance(data, dict), "Top-level YAML must be a mapping."
    return data


@pytest.fixture()
def workflow_dict(raw_workflow_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Deep copy of the reference workflow so each test can mutate freely."""
    return copy.deepcopy(raw_workflow_dict)


@pytest.fixture()
def workflow_yaml_path(workflow_dict: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    """Write the reference workflow to a temporary YAML file."""
    path = tmp_path / "workflow.yaml"
    with open(path, "w", encoding="utf-8") as fh:
        yaml.dump(workflow_dict, fh, default_flow_style=False, allow_unicode=True)
    return path


# ---------------------------------------------------------------------------
# Small workflows
# ---------------------------------------------------------------------------


@pytest.fixture()
def shop_dict() -> Dict[str, Any]:
    """Two entities: order (child) → user (parent), one-to-many."""
    return {
        "name": "Shop",
        "workflows": [
            {
                "name": "user",
                "props": [{"name": "age", "type": "number", "nullable": False}],
            },
            {
                "name": "order",
                "relations": [
                    {
                        "targetEntityName": "user",
                        "cardinality": "one-to-many",
                        "isParent": False,
                    }
                ],
            },
        ],
    }


@pytest.fixture()
def shop_yaml_path(shop_dict: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "shop.yaml"
    with open(path, "w", encoding="utf-8") as fh:
        yaml.dump(shop_dict, fh, default_flow_style=False)
    return path


@pytest.fixture()
def duplicate_entity_dict() -> Dict[str, Any]:
    """Two entities whose names differ only in case."""
    return {
        "name": "Shop",
        "workflows": [
            {"name": "User", "props": [{"name": "email", "type": "string"}]},
            {"name": "user", "props": [{"name": "email", "type": "string"}]},
        ],
    }


@pytest.fixture()
def dangling_relation_dict() -> Dict[str, Any]:
    return {
        "name": "Shop",
        "workflows": [
            {
                "name": "order",
                "relations": [
                    {"targetEntityName": "customer", "cardinality": "one-to-many"}
                ],
            },
        ],
    }


def _ring(cardinality: str, is_parent: bool) -> Dict[str, Any]:
    """a → b → c → a, every relation declared with the same shape."""
    names = ["a", "b", "c"]
    return {
        "name": "Ring",
        "workflows": [
            {
                "name": name,
                "props": [{"name": "label", "type": "string"}],
                "relations": [
                    {
                        "targetEntityName": names[(i + 1) % 3],
                        "cardinality": cardinality,
                        "isParent": is_parent,
                    }
                ],
            }
            for i, name in enumerate(names)
        ],
    }


@pytest.fixture()
def ownership_cycle_dict() -> Dict[str, Any]:
    return _ring("one-to-many", True)


@pytest.fixture()
def many_to_many_ring_dict() -> Dict[str, Any]:
    return _ring("many-to-many", False)


@pytest.fixture()
def non_owning_ring_dict() -> Dict[str, Any]:
    return _ring("one-to-many", False)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@pytest.fixture()
def output_root(tmp_path: pathlib.Path) -> pathlib.Path:
    return tmp_path / "generated"


@pytest.fixture()
def generation_config(output_root: pathlib.Path) -> GenerationConfig:
    return GenerationConfig(output_root=str(output_root))


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def restore_entigen_logger() -> Iterator[None]:
    """Undo the handler the CLI installs so caplog sees later records."""
    package_logger: logging.Logger = logging.getLogger("entigen")
    handlers = list(package_logger.handlers)
    level: int = package_logger.level
    propagate: bool = package_logger.propagate
    yield
    package_logger.handlers[:] = handlers
    package_logger.setLevel(level)
    package_logger.propagate = propagate
