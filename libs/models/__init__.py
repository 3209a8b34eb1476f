# =============================================================================
# Data Models Library
# =============================================================================
# Pydantic models and settings for the place-in-area pipeline.
# =============================================================================

"""
Data models for the place-in-area pipeline.

This library provides:
- Artifact / Stage: the declarative pipeline graph
- JoinRow: one (place, enclosing boundary) export row
- Run models: per-stage reports and run summaries
- Configuration models
"""

__version__ = "0.1.0"

# Pipeline graph models
from .artifact import (
    Artifact,
    ArtifactKind,
    SOURCE_KINDS,
)
from .stage import (
    StageCommand,
    StageDefinition,
)

# Export row model
from .join_row import (
    JOIN_EXPORT_COLUMNS,
    JoinRow,
    parse_admin_level,
    resolve_name,
)

# Run models
from .run import (
    RunSummary,
    StageOutcome,
    StageReport,
)

# Configuration models
from .config import (
    PipelineSettings,
    PostGISSettings,
    ToolSettings,
)

__all__ = [
    # Pipeline graph models
    "Artifact",
    "ArtifactKind",
    "SOURCE_KINDS",
    "StageCommand",
    "StageDefinition",
    # Export row model
    "JOIN_EXPORT_COLUMNS",
    "JoinRow",
    "parse_admin_level",
    "resolve_name",
    # Run models
    "RunSummary",
    "StageOutcome",
    "StageReport",
    # Configuration models
    "PipelineSettings",
    "PostGISSettings",
    "ToolSettings",
]
