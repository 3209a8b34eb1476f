# =============================================================================
# Pipeline Driver
# =============================================================================
# Runs the dependency graph for one input extract, then hands the export to
# the downstream report generator.
# =============================================================================

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Tuple, Union

from libs.models import RunSummary, StageDefinition, StageOutcome, StageReport

from .definition import PipelineLayout, build_place_in_area_stages
from .errors import PipelineError, StageExecutionError
from .executor import CommandExecutor
from .graph import DependencyGraph
from .runner import StageRunner
from .store import ArtifactStore, FileArtifactStore

__all__ = ["PipelineDriver", "REPORT_STAGE"]

logger = logging.getLogger(__name__)

# Name under which report generator failures are reported
REPORT_STAGE = "distance-report"


class PipelineDriver:
    """
    Sequences one pipeline run: stages first, then the report generator.

    Errors are never recovered locally; the first failure is logged with its
    stage and command and re-raised.

    Example:
        >>> layout = PipelineLayout.from_input("ireland.osm.pbf", "/data/out")
        >>> driver = PipelineDriver(layout, executor=ToolchainExecutor(...))
        >>> summary = driver.run()
        >>> summary.nothing_to_do
        False
    """

    def __init__(
        self,
        layout: PipelineLayout,
        executor: CommandExecutor,
        store: Optional[ArtifactStore] = None,
        report=None,
        report_path: Union[str, Path, None] = None,
        log=None,
    ):
        """
        Args:
            layout: Artifact layout for the input extract
            executor: Runs each stage's external command
            store: Artifact store (default: files under layout.output_dir)
            report: Object with ``generate(export_path, report_path)``
                returning a CommandResult; None skips the report
            report_path: Report location, relative to the output directory
            log: Logger instance
        """
        self.layout = layout
        self.store = store or FileArtifactStore(layout.output_dir)
        self.report = report
        self.report_path = (
            layout.output_dir / report_path if report_path is not None else None
        )
        self.log = log or logger
        self.graph = DependencyGraph(build_place_in_area_stages(layout))
        self.runner = StageRunner(
            self.store, executor, definition=layout.definition, log=self.log
        )

    def plan(self, force: bool = False) -> List[Tuple[StageDefinition, bool]]:
        """Which stages a run would execute."""
        return self.graph.plan(self.runner, force=force)

    def run(self, force: bool = False) -> RunSummary:
        """
        Run the pipeline and the downstream report.

        Args:
            force: Re-run every stage regardless of freshness

        Returns:
            RunSummary of the run

        Raises:
            PipelineError: First stage (or report) failure
        """
        summary = RunSummary(
            pipeline_name=self.layout.name,
            export_path=str(self.layout.export_path),
        )
        self.log.info(
            f"Pipeline {self.layout.name}: {self.layout.input_path} -> {self.layout.output_dir}"
        )

        try:
            self.graph.run_all(self.runner, force=force, reports=summary.stages)
        except PipelineError as e:
            summary.stages.append(
                StageReport(
                    stage=getattr(e, "stage", "unknown"),
                    outcome=StageOutcome.FAILED,
                    output_path="",
                    detail=str(e),
                )
            )
            self.log.error(f"Pipeline {self.layout.name} failed: {e}")
            raise

        if summary.nothing_to_do:
            self.log.info("All artifacts are up to date, nothing to do")
        else:
            self.log.info(f"Ran stages: {', '.join(summary.executed_stages)}")

        if self.report is not None and self.report_path is not None:
            self._generate_report()
            summary.report_path = str(self.report_path)
        else:
            self.log.info("No report generator configured, stopping at the export")

        summary.completed_at = datetime.now(timezone.utc)
        return summary

    def _generate_report(self) -> None:
        export_path = self.layout.export_path
        self.log.info(f"Generating report: {export_path} -> {self.report_path}")
        result = self.report.generate(str(export_path), str(self.report_path))
        if not result.success:
            self.log.error(
                f"Report generator failed with status {result.return_code}: "
                f"{' '.join(result.command)}"
            )
            raise StageExecutionError(
                REPORT_STAGE, result.return_code, result.command, result.stderr
            )
