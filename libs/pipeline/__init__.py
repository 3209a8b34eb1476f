# =============================================================================
# Pipeline Library
# =============================================================================
# Staleness-tracked incremental execution of the place-in-area pipeline.
# =============================================================================

"""
Incremental pipeline execution.

This library provides:
- ArtifactStore: freshness + atomic commit (FileArtifactStore, MemoryArtifactStore)
- CommandExecutor / CommandResult: capability interface to external tools
- StageRunner: run-or-skip a single stage
- DependencyGraph: explicit stage DAG, plan and fail-fast run_all
- PipelineLayout / build_place_in_area_stages: the five-stage pipeline
- PipelineDriver: stages + downstream report
- Errors: MissingInputError, StageExecutionError, PartialStreamError
"""

from .errors import (
    MissingInputError,
    PartialStreamError,
    PipelineError,
    StageExecutionError,
)
from .result import CommandResult
from .store import ArtifactStore, FileArtifactStore, MemoryArtifactStore
from .executor import CommandExecutor
from .runner import StageRunner
from .graph import DependencyGraph
from .definition import (
    DEFAULT_STYLE_PATH,
    DEFINITION_PATH,
    EXPORT_LOGIC_PATHS,
    IMPORT_LOGIC_PATHS,
    PipelineLayout,
    build_place_in_area_stages,
)
from .driver import REPORT_STAGE, PipelineDriver

__all__ = [
    "MissingInputError",
    "PartialStreamError",
    "PipelineError",
    "StageExecutionError",
    "CommandResult",
    "ArtifactStore",
    "FileArtifactStore",
    "MemoryArtifactStore",
    "CommandExecutor",
    "StageRunner",
    "DependencyGraph",
    "DEFAULT_STYLE_PATH",
    "DEFINITION_PATH",
    "EXPORT_LOGIC_PATHS",
    "IMPORT_LOGIC_PATHS",
    "PipelineLayout",
    "build_place_in_area_stages",
    "REPORT_STAGE",
    "PipelineDriver",
]
