# =============================================================================
# Pipeline Errors
# =============================================================================
# Every error aborts the remaining pipeline. Each carries enough identity
# (stage, artifact, command) to reproduce the failure by hand.
# =============================================================================

from typing import Optional, Sequence

__all__ = [
    "PipelineError",
    "MissingInputError",
    "StageExecutionError",
    "PartialStreamError",
]


class PipelineError(RuntimeError):
    """Base class for errors that abort a pipeline run."""

    exit_status = 1


class MissingInputError(PipelineError):
    """A stage's declared input artifact does not exist."""

    def __init__(self, stage: str, artifact: str, path: str):
        self.stage = stage
        self.artifact = artifact
        self.path = path
        super().__init__(
            f"Stage {stage}: input artifact '{artifact}' is missing ({path})"
        )


class StageExecutionError(PipelineError):
    """An external command exited non-zero."""

    def __init__(
        self,
        stage: str,
        return_code: int,
        command: Sequence[str],
        stderr: Optional[str] = None,
    ):
        self.stage = stage
        self.return_code = return_code
        self.command = list(command)
        self.stderr = stderr or ""
        message = (
            f"Stage {stage}: command exited with status {return_code}: "
            f"{' '.join(self.command)}"
        )
        last_line = self.stderr.strip().splitlines()[-1:] if self.stderr else []
        if last_line:
            message += f" ({last_line[0]})"
        super().__init__(message)

    @property
    def exit_status(self) -> int:
        """
        Status for the CLI to exit with.

        Propagates the command's own status; processes killed by a signal
        (negative return codes) map to 128 + signal number, like a shell.
        """
        if self.return_code < 0:
            return 128 + (-self.return_code)
        if 0 < self.return_code < 256:
            return self.return_code
        return 1


class PartialStreamError(PipelineError):
    """The join/export stream stopped before the query was exhausted."""

    def __init__(self, stage: str, rows_written: int):
        self.stage = stage
        self.rows_written = rows_written
        super().__init__(
            f"Stage {stage}: export stream terminated after {rows_written:,} rows; "
            f"partial output discarded"
        )
