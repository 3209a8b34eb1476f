# =============================================================================
# Run Model
# =============================================================================
# Per-stage reports and the summary of one pipeline invocation. A run owns
# no persistent state; these models only describe what happened.
# =============================================================================

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


__all__ = ["RunSummary", "StageOutcome", "StageReport"]


class StageOutcome(str, Enum):
    """What the stage runner did with a stage."""

    SKIPPED = "skipped"  # output already fresh
    EXECUTED = "executed"
    FAILED = "failed"


class StageReport(BaseModel):
    """
    Result of running (or skipping) one stage.

    Attributes:
        stage: Stage name
        outcome: skipped / executed / failed
        output_path: Resolved location of the stage's output artifact
        command: External command that was run (empty when skipped)
        rows_written: Rows streamed to the output (join export only)
        duration_seconds: Wall-clock time spent in the stage
        detail: Error message for failed stages
    """

    stage: str = Field(..., description="Stage name")
    outcome: StageOutcome = Field(..., description="What happened to the stage")
    output_path: str = Field(..., description="Resolved output artifact location")
    command: List[str] = Field(default_factory=list, description="Command that was run")
    rows_written: Optional[int] = Field(None, description="Rows streamed to the output")
    duration_seconds: float = Field(0.0, ge=0, description="Time spent in the stage")
    detail: Optional[str] = Field(None, description="Error details if the stage failed")


class RunSummary(BaseModel):
    """
    Summary of one pipeline invocation.

    Attributes:
        pipeline_name: Logical pipeline name derived from the input filename
        export_path: Location of the terminal join export
        report_path: Location of the downstream report, if one was generated
        stages: Reports in execution order
        started_at: Timestamp when the run started
        completed_at: Timestamp when the run finished
    """

    pipeline_name: str = Field(..., description="Logical pipeline name")
    export_path: str = Field(..., description="Terminal export location")
    report_path: Optional[str] = Field(None, description="Downstream report location")
    stages: List[StageReport] = Field(default_factory=list, description="Stage reports")
    started_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Run start timestamp",
    )
    completed_at: Optional[datetime] = Field(None, description="Run completion timestamp")

    @property
    def executed_stages(self) -> List[str]:
        return [r.stage for r in self.stages if r.outcome == StageOutcome.EXECUTED]

    @property
    def skipped_stages(self) -> List[str]:
        return [r.stage for r in self.stages if r.outcome == StageOutcome.SKIPPED]

    @property
    def nothing_to_do(self) -> bool:
        """True when every stage was already fresh."""
        return bool(self.stages) and not self.executed_stages
