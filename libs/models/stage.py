# =============================================================================
# Stage Model
# =============================================================================
# Declarative description of one pipeline stage: which artifacts it reads,
# which artifact it produces and which external collaborator does the work.
# =============================================================================

import re
from enum import Enum
from typing import Any, Dict, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

from .artifact import Artifact

__all__ = ["StageCommand", "StageDefinition"]

_STAGE_NAME_RE = re.compile(r"^[a-z][a-z0-9-]*$")


class StageCommand(str, Enum):
    """External collaborator a stage delegates to."""

    TAGS_FILTER = "tags_filter"  # osmium tags-filter
    IMPORT = "import"  # osm2pgsql + post-import SQL
    JOIN_EXPORT = "join_export"  # PostGIS containment join streamed to gzip CSV


class StageDefinition(BaseModel):
    """
    One transformation in the pipeline.

    A stage is treated as a pure function of its inputs' content, but it is
    only re-run when an input's timestamp is newer than its output's.

    Attributes:
        name: Stage name (kebab-case, e.g. "filter-places")
        inputs: Ordered input artifacts
        output: The single output artifact
        command: Which collaborator performs the stage
        params: Command-specific parameters
        description: Human-readable summary, used in logs
    """

    name: str = Field(..., description="Stage name (kebab-case)")
    inputs: Tuple[Artifact, ...] = Field(..., description="Ordered input artifacts")
    output: Artifact = Field(..., description="Output artifact")
    command: StageCommand = Field(..., description="Collaborator performing the stage")
    params: Dict[str, Any] = Field(default_factory=dict, description="Command parameters")
    description: str = Field("", description="Human-readable summary")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not _STAGE_NAME_RE.match(v):
            raise ValueError(
                f"Invalid stage name: {v!r}. Must match: {_STAGE_NAME_RE.pattern}"
            )
        return v

    @model_validator(mode="after")
    def validate_artifacts(self) -> "StageDefinition":
        """
        Validate the stage's artifact wiring.

        Raises:
            ValueError: If the stage has no inputs, produces a source artifact,
                or lists the same input twice
        """
        if not self.inputs:
            raise ValueError(f"Stage {self.name} must declare at least one input")
        if self.output.is_source:
            raise ValueError(
                f"Stage {self.name} cannot produce {self.output.kind.value} artifact "
                f"'{self.output.name}'"
            )
        names = [artifact.name for artifact in self.inputs]
        if len(names) != len(set(names)):
            raise ValueError(f"Stage {self.name} lists an input more than once: {names}")
        if self.output.name in names:
            raise ValueError(f"Stage {self.name} consumes its own output '{self.output.name}'")
        return self
