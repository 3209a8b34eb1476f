# =============================================================================
# Stage Runner
# =============================================================================
# Runs one stage, or skips it when its output is already at least as new as
# every input and the pipeline definition.
# =============================================================================

import logging
import time
from pathlib import Path
from typing import Optional

from libs.models import Artifact, StageDefinition, StageOutcome, StageReport

from .errors import MissingInputError, StageExecutionError
from .executor import CommandExecutor
from .store import ArtifactStore

__all__ = ["StageRunner"]

logger = logging.getLogger(__name__)


class StageRunner:
    """
    Timestamp-based incremental stage execution.

    Freshness compares timestamps only. An input whose content changes
    without its timestamp advancing (e.g. a restored backup) is not
    detected; force=True is the escape hatch.

    Attributes:
        store: Artifact store holding inputs and outputs
        executor: Runs the stage's external command
        definition: Pipeline definition artifact; editing it makes every
            stage stale (None disables the check)
        log: Logger instance (Dagster's context.log inside ops)
    """

    def __init__(
        self,
        store: ArtifactStore,
        executor: CommandExecutor,
        definition: Optional[Artifact] = None,
        log=None,
    ):
        self.store = store
        self.executor = executor
        self.definition = definition
        self.log = log or logger

    def check_inputs(self, stage: StageDefinition) -> None:
        """
        Raises:
            MissingInputError: Naming the first missing input (or definition)
        """
        required = list(stage.inputs)
        if self.definition is not None:
            required.append(self.definition)
        for artifact in required:
            if not self.store.exists(artifact):
                raise MissingInputError(
                    stage.name, artifact.name, str(self.store.resolve(artifact))
                )

    def is_fresh(self, stage: StageDefinition) -> bool:
        """
        True iff the output exists and is not older than any input or the
        pipeline definition. Missing inputs count as not fresh.
        """
        output_ts = self.store.timestamp(stage.output)
        if output_ts is None:
            return False

        upstream = list(stage.inputs)
        if self.definition is not None:
            upstream.append(self.definition)

        for artifact in upstream:
            input_ts = self.store.timestamp(artifact)
            if input_ts is None or input_ts > output_ts:
                return False
        return True

    def run(self, stage: StageDefinition, force: bool = False) -> StageReport:
        """
        Run a stage unless its output is fresh.

        Args:
            stage: Stage to run
            force: Run even if the output is fresh

        Returns:
            StageReport with outcome SKIPPED or EXECUTED

        Raises:
            MissingInputError: If an input artifact does not exist
            StageExecutionError: If the command exits non-zero
            PartialStreamError: If a streamed export stops part way
        """
        self.check_inputs(stage)
        output_path = self.store.resolve(stage.output)

        if not force and self.is_fresh(stage):
            self.log.info(f"[{stage.name}] up to date: {output_path}")
            return StageReport(
                stage=stage.name,
                outcome=StageOutcome.SKIPPED,
                output_path=str(output_path),
            )

        self.log.info(f"[{stage.name}] {stage.description or 'running'}...")
        inputs = [self.store.resolve(artifact) for artifact in stage.inputs]
        staging: Optional[Path] = None
        if not stage.output.is_marker:
            staging = self.store.staging_path(stage.output)

        started = time.monotonic()
        try:
            result = self.executor.execute(
                stage, inputs, staging if staging is not None else output_path, self.log
            )
        except BaseException:
            # Interrupted or failed mid-write: nothing reaches the final path
            if staging is not None:
                self.store.discard(staging)
            raise

        if not result.success:
            if staging is not None:
                self.store.discard(staging)
            self.log.error(
                f"[{stage.name}] failed with status {result.return_code}: "
                f"{' '.join(result.command)}"
            )
            raise StageExecutionError(
                stage.name, result.return_code, result.command, result.stderr
            )

        if staging is not None:
            self.store.commit(staging, stage.output)
        else:
            self.store.touch(stage.output)

        duration = time.monotonic() - started
        self.log.info(f"[{stage.name}] done in {duration:.1f}s: {output_path}")
        return StageReport(
            stage=stage.name,
            outcome=StageOutcome.EXECUTED,
            output_path=str(output_path),
            command=list(result.command),
            rows_written=result.rows_written,
            duration_seconds=duration,
        )
