# File: entigen/__init__.py
"""
Entigen: Workflow Compiler
===========================

Compiles a declarative workflow (entities, typed properties, validation
rules and relations, given as JSON/YAML) into a mutually consistent set of
generated artifacts: a Prisma storage schema, TypeScript runtime types, zod
request validators, and Express CRUD services, controllers and routes.

Architecture overview::

    ┌──────────────┐     ┌──────────────────┐     ┌──────────────────┐
    │  CLI / Entry │────▶│ WorkflowCompiler │────▶│ TemplateGenerator│
    │   (cli.py)   │     │  (generator.py)  │     │  (templates.py)  │
    └──────────────┘     └────────┬─────────┘     └──────────────────┘
                                  │
             ┌──────────────┬─────┴──────┬─────────────┐
             ▼              ▼            ▼             ▼
       ┌──────────┐  ┌──────────┐  ┌──────────┐  ┌───────────┐
       │validators│  │ resolver │  │  models  │  │ exporters │
       └──────────┘  └──────────┘  └──────────┘  └───────────┘
                           │
                      ┌────┴─────┐
                      │  naming  │
                      └──────────┘

Usage::

    # As a library
    from entigen import WorkflowCompiler, GenerationConfig
    report = WorkflowCompiler(GenerationConfig(output_root="./out")).compile_raw(data)

    # From the command line
    python -m entigen --schema shop.yaml --output ./generated --verbose
"""

from __future__ import annotations

__version__: str = "1.0.0"
__license__: str = "MIT"

from entigen.errors import CompilationError, GeneratorDefect, MaterializationError
from entigen.exporters import ArtifactExporter, ExportManifest, ExportResult
from entigen.generator import (
    CompilationHook,
    CompilationReport,
    CompilerState,
    WorkflowCompiler,
    load_workflow_file,
    parse_raw_workflow,
)
from entigen.models import (
    Cardinality,
    Entity,
    FieldType,
    GenerationConfig,
    Property,
    Relation,
    Workflow,
)
from entigen.resolver import FieldKind, RelationField, ResolvedEntity, resolve_relations
from entigen.templates import TemplateGenerator
from entigen.validators import ValidationIssue, ValidationResult, validate_full

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    "__version__",
    "__license__",
    # Orchestrator
    "WorkflowCompiler",
    "CompilationReport",
    "CompilerState",
    "CompilationHook",
    "load_workflow_file",
    "parse_raw_workflow",
    # Errors
    "CompilationError",
    "GeneratorDefect",
    "MaterializationError",
    # Models
    "Cardinality",
    "Entity",
    "FieldType",
    "GenerationConfig",
    "Property",
    "Relation",
    "Workflow",
    # Validation
    "validate_full",
    "ValidationIssue",
    "ValidationResult",
    # Resolution
    "resolve_relations",
    "FieldKind",
    "RelationField",
    "ResolvedEntity",
    # Generation & export
    "TemplateGenerator",
    "ArtifactExporter",
    "ExportManifest",
    "ExportResult",
]
