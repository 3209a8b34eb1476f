# =============================================================================
# Command Result
# =============================================================================
# Serializable result of one collaborator invocation.
# =============================================================================

from dataclasses import dataclass
from typing import Optional

__all__ = ["CommandResult"]


@dataclass
class CommandResult:
    """
    Serializable result from an external command.

    All fields are JSON-serializable so results can be logged, returned from
    Dagster ops, or produced by fakes in tests.
    """
    success: bool
    command: list[str]
    stdout: str
    stderr: str
    return_code: int
    output_path: Optional[str] = None
    rows_written: Optional[int] = None
