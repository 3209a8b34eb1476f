# =============================================================================
# Artifact Model
# =============================================================================
# Named pipeline outputs (and the sources they derive from) whose freshness
# is judged by modification time.
# =============================================================================

from enum import Enum

from pydantic import BaseModel, Field, field_validator

__all__ = ["Artifact", "ArtifactKind", "SOURCE_KINDS"]


class ArtifactKind(str, Enum):
    """Role of an artifact in the pipeline."""

    ROOT = "root"  # the planet/region extract handed to the pipeline
    DEFINITION = "definition"  # pipeline logic and importer style
    EXTRACT = "extract"
    MARKER = "marker"  # zero-content file timestamping a side-effecting stage
    EXPORT = "export"


# Artifacts of these kinds exist before the pipeline runs and have no producer
SOURCE_KINDS = frozenset({ArtifactKind.ROOT, ArtifactKind.DEFINITION})


class Artifact(BaseModel):
    """
    A named, timestamped input or output of the pipeline.

    Artifacts are identified by their logical name. Locations are relative to
    the artifact store's root directory unless absolute.

    Attributes:
        name: Logical name (e.g. "place extract")
        path: Location relative to the output directory, or absolute
        kind: Role of the artifact (root, definition, extract, marker, export)
    """

    name: str = Field(..., description="Logical artifact name")
    path: str = Field(..., description="Location relative to the store root, or absolute")
    kind: ArtifactKind = Field(..., description="Role of the artifact")

    model_config = {"frozen": True}

    @field_validator("name", "path")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must be a non-empty string")
        return v

    @property
    def is_source(self) -> bool:
        """True for artifacts that no stage produces."""
        return self.kind in SOURCE_KINDS

    @property
    def is_marker(self) -> bool:
        return self.kind == ArtifactKind.MARKER
