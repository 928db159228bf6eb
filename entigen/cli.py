# File: entigen/cli.py
"""
Entigen - Command-Line Interface
=================================

CLI built with the standard-library ``argparse`` module.

Usage examples::

    # Compile a workflow into ./generated/<container>/<project>/
    python -m entigen --schema shop.yaml --output ./generated

    # Verbose output, MySQL datasource, larger pages
    python -m entigen -s shop.json -o ./out -v --provider mysql --page-size 25

    # Validate only (no file output)
    python -m entigen -s shop.yaml --validate-only

Exit codes:
    0 : success
    1 : validation error
    2 : generation error (internal defect)
    3 : export error (filesystem)
    4 : input/argument error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, NoReturn, Optional, Sequence

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("entigen")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_VALIDATION_ERROR: int = 1
EXIT_GENERATION_ERROR: int = 2
EXIT_EXPORT_ERROR: int = 3
EXIT_INPUT_ERROR: int = 4


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the ``entigen`` logger.

    Args:
        verbosity: -1 = silent, 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    elif verbosity == 0:
        level = logging.WARNING
    else:
        level = logging.CRITICAL + 1

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
            datefmt="%H:%M:%S",
        )
    )

    root_logger: logging.Logger = logging.getLogger("entigen")
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


class _ArgumentParser(argparse.ArgumentParser):
    """Reports argument errors with the input-error exit code."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(EXIT_INPUT_ERROR, f"{self.prog}: error: {message}\n")


def _positive_int(value: str) -> int:
    try:
        number: int = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a value >= 1, got {number}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    from entigen import __version__

    parser: argparse.ArgumentParser = _ArgumentParser(
        prog="entigen",
        description=(
            "Entigen: workflow compiler.\n\n"
            "Turns a declarative workflow of entities, fields, validation rules\n"
            "and relations (JSON/YAML) into a Prisma schema plus TypeScript\n"
            "types, zod validators and Express services, controllers and routes."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s -s shop.yaml -o ./generated\n"
            "  %(prog)s -s shop.json -o ./out -v --provider mysql\n"
            "  %(prog)s -s shop.yaml --validate-only\n"
        ),
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Entigen v{__version__}",
    )

    parser.add_argument(
        "-s", "--schema",
        type=str,
        required=True,
        metavar="PATH",
        help="Path to the workflow file (JSON or YAML).",
    )
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        metavar="DIR",
        help=(
            "Root directory under which a unique output container is created. "
            "Required unless --validate-only is set."
        ),
    )

    mode_group = parser.add_argument_group("operation modes")
    mode_group.add_argument(
        "--validate-only",
        action="store_true",
        default=False,
        help="Only validate the workflow without generating code.",
    )

    config_group = parser.add_argument_group("configuration overrides")
    config_group.add_argument(
        "--page-size",
        type=_positive_int,
        default=None,
        metavar="N",
        help="Default page size of generated list endpoints.",
    )
    config_group.add_argument(
        "--max-page-size",
        type=_positive_int,
        default=None,
        metavar="N",
        help="Upper bound on the page size of generated list endpoints.",
    )
    config_group.add_argument(
        "--provider",
        type=str,
        default=None,
        choices=["postgresql", "mysql", "sqlite", "sqlserver", "cockroachdb"],
        help="Prisma datasource provider.",
    )

    verbosity_group = parser.add_argument_group("verbosity")
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG).",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress all log output.",
    )

    return parser


# ---------------------------------------------------------------------------
# Config override builder
# ---------------------------------------------------------------------------


def _build_config_overrides(args: argparse.Namespace) -> Dict[str, object]:
    """Config values given on the command line; they win over the file's."""
    overrides: Dict[str, object] = {}
    if args.output is not None:
        overrides["output_root"] = str(Path(args.output).resolve())
    if args.page_size is not None:
        overrides["default_page_size"] = args.page_size
    if args.max_page_size is not None:
        overrides["max_page_size"] = args.max_page_size
    if args.provider is not None:
        overrides["datasource_provider"] = args.provider
    return overrides


# ---------------------------------------------------------------------------
# Validate-only mode
# ---------------------------------------------------------------------------


def _run_validate_only(schema_path: Path) -> int:
    """Run validation only. Returns the appropriate exit code."""
    import pydantic

    from entigen.generator import load_workflow_file, parse_raw_workflow
    from entigen.utils import Timer
    from entigen.validators import ValidationResult, result_from_parse_error, validate_full

    logger.info("Running validation-only mode for: %s", schema_path)

    try:
        raw_data = load_workflow_file(schema_path)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Failed to load workflow: %s", exc)
        return EXIT_INPUT_ERROR

    entity_count: int = 0
    with Timer("validation") as t:
        try:
            workflow, _ = parse_raw_workflow(raw_data)
        except ValueError as exc:
            if isinstance(exc.__cause__, pydantic.ValidationError):
                result: ValidationResult = result_from_parse_error(exc.__cause__, raw_data)
            else:
                result = ValidationResult()
                result.add_error("INVALID_INPUT", str(exc))
        else:
            entity_count = len(workflow.entities)
            result = validate_full(workflow)

    print(f"\n{'=' * 50}")
    print("  Workflow Validation Report")
    print(f"{'=' * 50}")
    print(f"  File:     {schema_path.name}")
    print(f"  Entities: {entity_count}")
    print(f"  Time:     {t.elapsed:.3f}s")
    print(f"  Valid:    {'Yes' if result.is_valid else 'No'}")

    if result.errors:
        print(f"\n  Errors ({result.error_count}):")
        for err in result.errors:
            print(f"    ✗ {err}")

    if result.warnings:
        print(f"\n  Warnings ({result.warning_count}):")
        for warn in result.warnings:
            print(f"    ⚠ {warn}")

    if result.is_valid and not result.warnings:
        print("\n  All validations passed.")

    print(f"{'=' * 50}\n")

    return EXIT_SUCCESS if result.is_valid else EXIT_VALIDATION_ERROR


# ---------------------------------------------------------------------------
# Full compilation mode
# ---------------------------------------------------------------------------


def _run_compilation(schema_path: Path, args: argparse.Namespace) -> int:
    """Run the full pipeline. Returns the appropriate exit code."""
    from entigen.generator import CompilationReport, WorkflowCompiler

    compiler: WorkflowCompiler = WorkflowCompiler()
    report: CompilationReport = compiler.compile_file(
        schema_path,
        config_overrides=_build_config_overrides(args),
    )

    print(report.summary())

    if report.success:
        return EXIT_SUCCESS
    if report.input_errors:
        return EXIT_INPUT_ERROR
    if report.validation_errors:
        return EXIT_VALIDATION_ERROR
    if report.generation_errors:
        return EXIT_EXPORT_ERROR
    return EXIT_GENERATION_ERROR


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main CLI entry point.

    Can be called from ``__main__.py`` or directly for testing.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).
    """
    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    verbosity: int = -1 if args.quiet else args.verbose
    _setup_logging(verbosity)

    schema_path: Path = Path(args.schema).resolve()
    if not schema_path.is_file():
        logger.error("Workflow file not found: %s", schema_path)
        sys.exit(EXIT_INPUT_ERROR)

    if args.validate_only:
        sys.exit(_run_validate_only(schema_path))

    if args.output is None:
        logger.error(
            "Output directory is required for compilation. "
            "Use -o/--output or --validate-only."
        )
        parser.print_usage(sys.stderr)
        sys.exit(EXIT_INPUT_ERROR)

    logger.info("Workflow: %s", schema_path)
    logger.info("Output:   %s", Path(args.output).resolve())

    exit_code: int = _run_compilation(schema_path, args)
    if exit_code == EXIT_SUCCESS:
        logger.info("Compilation completed successfully.")
    else:
        logger.error("Compilation failed with exit code %d.", exit_code)

    sys.exit(exit_code)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "cli_main",
    "EXIT_SUCCESS",
    "EXIT_VALIDATION_ERROR",
    "EXIT_GENERATION_ERROR",
    "EXIT_EXPORT_ERROR",
    "EXIT_INPUT_ERROR",
]

logger.debug("entigen.cli loaded: %d public symbols.", len(__all__))
