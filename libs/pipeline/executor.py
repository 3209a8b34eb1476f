# =============================================================================
# Command Executor Interface
# =============================================================================
# Capability interface the stage runner uses to invoke collaborators.
# =============================================================================

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Sequence

from libs.models import StageDefinition

from .result import CommandResult

__all__ = ["CommandExecutor"]


class CommandExecutor(ABC):
    """
    Runs the external command behind a stage.

    The production implementation drives osmium, osm2pgsql and PostGIS;
    tests substitute deterministic fakes.
    """

    @abstractmethod
    def execute(
        self,
        stage: StageDefinition,
        inputs: Sequence[Path],
        output: Path,
        log,
    ) -> CommandResult:
        """
        Run the stage's command.

        Args:
            stage: Stage being run
            inputs: Resolved input locations, in declared order
            output: Where to write the output. For file artifacts this is a
                staging location the runner commits afterwards; for markers
                it is the marker path, which the runner touches itself.
            log: Logger instance

        Returns:
            CommandResult; success=False makes the runner fail the stage

        Raises:
            PartialStreamError: If a streamed output stops part way
        """
        pass
