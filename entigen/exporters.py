# File: entigen/exporters.py
"""
Entigen - Artifact Exporter (File-System Manager)
==================================================

Responsible for:
    1. Creating a uniquely named container directory per compilation, so
       concurrent compilations never share a path.
    2. Writing every artifact atomically (write-to-temp then rename).
    3. Stopping at the first failed write and removing the whole container,
       so a caller sees either every file or none.
    4. Producing an export manifest with checksums.

Layout: ``<output_root>/<container>/<project name>/<relative path>``.

Complexity: O(F) where F = total number of output files.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping

from entigen.errors import GeneratorDefect, MaterializationError
from entigen.models import GenerationConfig
from entigen.utils import Timer, count_lines, sha256_hex

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("entigen.exporters")


# ---------------------------------------------------------------------------
# Data classes for export results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FileRecord:
    """Immutable record of a single exported file."""

    relative_path: str
    absolute_path: str
    size_bytes: int
    line_count: int
    sha256: str


@dataclass(frozen=False, slots=True)
class ExportManifest:
    """
    Complete manifest of all exported files.

    Serialisable to JSON for reproducibility checks.
    """

    project_name: str = ""
    generator_version: str = ""
    export_timestamp: str = ""
    output_directory: str = ""
    total_files: int = 0
    total_bytes: int = 0
    total_lines: int = 0
    files: List[FileRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert manifest to a JSON-serialisable dictionary."""
        return {
            "project_name": self.project_name,
            "generator_version": self.generator_version,
            "export_timestamp": self.export_timestamp,
            "output_directory": self.output_directory,
            "total_files": self.total_files,
            "total_bytes": self.total_bytes,
            "total_lines": self.total_lines,
            "files": [
                {
                    "relative_path": f.relative_path,
                    "size_bytes": f.size_bytes,
                    "line_count": f.line_count,
                    "sha256": f.sha256,
                }
                for f in self.files
            ],
        }

    def to_json(self, indent_size: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent_size, ensure_ascii=False)

    def relative_paths(self) -> List[str]:
        return [f.relative_path for f in self.files]


@dataclass(frozen=True, slots=True)
class ExportResult:
    """Result of a successful ``ArtifactExporter.export()``."""

    container_directory: Path
    project_directory: Path
    manifest: ExportManifest
    elapsed_seconds: float


# ---------------------------------------------------------------------------
# ArtifactExporter class
# ---------------------------------------------------------------------------


class ArtifactExporter:
    """
    Writes one compilation's artifacts into a fresh container directory.

    Usage::

        exporter = ArtifactExporter(config)
        result = exporter.export("Shop", generated_files)
        print(result.project_directory)

    Each call to ``export`` allocates its own container; the exporter holds
    no state between calls.
    """

    def __init__(self, config: GenerationConfig) -> None:
        self._config: GenerationConfig = config
        self._output_root: Path = Path(config.output_root)
        logger.debug("ArtifactExporter initialised: output_root=%s.", self._output_root)

    # -----------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------

    def export(self, project_name: str, generated_files: Mapping[str, str]) -> ExportResult:
        """
        Materialize *generated_files* (relative_path → content).

        Raises:
            MaterializationError: on the first I/O failure, after the
                container directory has been removed.
            GeneratorDefect: on any other failure while writing; the
                container is removed as well.
        """
        with Timer("export") as timer:
            container: Path = self._create_container()
            project_dir: Path = container / project_name
            records: List[FileRecord] = []

            rel_path: str = ""
            try:
                for rel_path in sorted(generated_files):
                    records.append(
                        self._write_single_file(
                            project_dir / rel_path, generated_files[rel_path], rel_path
                        )
                    )
            except OSError as exc:
                error_msg: str = f"Failed to write {rel_path}: {type(exc).__name__}: {exc}"
                logger.error(error_msg)
                self.discard(container)
                raise MaterializationError(error_msg, path=rel_path) from exc
            except Exception as exc:
                logger.error(
                    "Unexpected %s while writing %s; discarding output.",
                    type(exc).__name__,
                    rel_path,
                )
                self.discard(container)
                raise GeneratorDefect(
                    f"Could not materialize {rel_path}: {type(exc).__name__}: {exc}"
                ) from exc

        manifest: ExportManifest = self._build_manifest(project_name, project_dir, records)
        logger.info(
            "Export completed: %d files, %d bytes, %.3fs → %s",
            manifest.total_files,
            manifest.total_bytes,
            timer.elapsed,
            project_dir,
        )
        return ExportResult(
            container_directory=container,
            project_directory=project_dir,
            manifest=manifest,
            elapsed_seconds=timer.elapsed,
        )

    def discard(self, container: Path) -> bool:
        """
        Remove a container and everything in it.  Failures are logged and
        reported through the return value, never raised.
        """
        try:
            shutil.rmtree(container)
        except FileNotFoundError:
            return True
        except OSError as exc:
            logger.error("Could not remove output container %s: %s", container, exc)
            return False
        logger.info("Removed output container: %s", container)
        return True

    # -----------------------------------------------------------------
    # Internal: directory management
    # -----------------------------------------------------------------

    def _create_container(self) -> Path:
        try:
            self._output_root.mkdir(parents=True, exist_ok=True)
            container: str = tempfile.mkdtemp(
                prefix=self._config.container_prefix, dir=str(self._output_root)
            )
        except OSError as exc:
            raise MaterializationError(
                f"Could not create output container under {self._output_root}: {exc}"
            ) from exc
        logger.debug("Created output container: %s", container)
        return Path(container)

    # -----------------------------------------------------------------
    # Internal: file writing
    # -----------------------------------------------------------------

    def _write_single_file(self, full_path: Path, content: str, rel_path: str) -> FileRecord:
        full_path.parent.mkdir(parents=True, exist_ok=True)

        encoded: bytes = content.encode("utf-8")
        self._atomic_write(full_path, encoded)

        record: FileRecord = FileRecord(
            relative_path=rel_path,
            absolute_path=str(full_path),
            size_bytes=len(encoded),
            line_count=count_lines(content),
            sha256=sha256_hex(content),
        )
        logger.debug(
            "Wrote file: %s (%d bytes, %d lines).",
            rel_path,
            record.size_bytes,
            record.line_count,
        )
        return record

    @staticmethod
    def _atomic_write(target_path: Path, data: bytes) -> None:
        """
        Write *data* through a temporary file in the target directory, then
        rename it into place.  The temporary file is removed on failure and
        the error propagates.
        """
        fd: int = -1
        tmp_path: str = ""
        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=str(target_path.parent),
                prefix=f".{target_path.name}.",
                suffix=".tmp",
            )
            os.write(fd, data)
            os.fsync(fd)
            os.close(fd)
            fd = -1
            os.replace(tmp_path, str(target_path))
        except OSError:
            if fd >= 0:
                try:
                    os.close(fd)
                except OSError as close_exc:
                    logger.debug("Could not close %s: %s", tmp_path, close_exc)
            if tmp_path and os.path.exists(tmp_path):
                try:
                    os.unlink(tmp_path)
                except OSError as unlink_exc:
                    logger.debug("Could not remove %s: %s", tmp_path, unlink_exc)
            raise

    # -----------------------------------------------------------------
    # Internal: manifest
    # -----------------------------------------------------------------

    def _build_manifest(
        self, project_name: str, project_dir: Path, records: List[FileRecord]
    ) -> ExportManifest:
        import entigen

        return ExportManifest(
            project_name=project_name,
            generator_version=entigen.__version__,
            export_timestamp=time.strftime("%Y-%m-%dT%H:%M:%S%z"),
            output_directory=str(project_dir),
            total_files=len(records),
            total_bytes=sum(r.size_bytes for r in records),
            total_lines=sum(r.line_count for r in records),
            files=list(records),
        )


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ArtifactExporter",
    "ExportManifest",
    "ExportResult",
    "FileRecord",
]

logger.debug("entigen.exporters loaded: %d public symbols.", len(__all__))
