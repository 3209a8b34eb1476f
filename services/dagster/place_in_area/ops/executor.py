# =============================================================================
# Toolchain Executor
# =============================================================================
# The production CommandExecutor: dispatches each stage command to osmium,
# osm2pgsql or PostGIS.
# =============================================================================

from pathlib import Path
from typing import Sequence

from libs.models import StageCommand, StageDefinition
from libs.pipeline import CommandExecutor, CommandResult

from .filter_op import _filter_extract
from .import_op import _import_extract
from .join_export_op import DEFAULT_BATCH_SIZE, _export_join

__all__ = ["ToolchainExecutor"]


class ToolchainExecutor(CommandExecutor):
    """
    Runs stages against the real toolchain.

    Attributes:
        osmium: OsmiumResource
        osm2pgsql: Osm2pgsqlResource
        postgis: PostGISResource
        progress_every: Export progress logging interval in rows
        batch_size: Export cursor batch size

    Example:
        >>> executor = ToolchainExecutor(
        ...     osmium=OsmiumResource(),
        ...     osm2pgsql=Osm2pgsqlResource(),
        ...     postgis=PostGISResource(),
        ... )
        >>> PipelineDriver(layout, executor).run()
    """

    def __init__(
        self,
        osmium,
        osm2pgsql,
        postgis,
        progress_every: int = 100000,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ):
        self.osmium = osmium
        self.osm2pgsql = osm2pgsql
        self.postgis = postgis
        self.progress_every = progress_every
        self.batch_size = batch_size

    def execute(
        self,
        stage: StageDefinition,
        inputs: Sequence[Path],
        output: Path,
        log,
    ) -> CommandResult:
        if stage.command == StageCommand.TAGS_FILTER:
            return _filter_extract(self.osmium, stage, inputs, output, log)
        if stage.command == StageCommand.IMPORT:
            return _import_extract(
                self.osm2pgsql, self.postgis, stage, inputs, output, log
            )
        if stage.command == StageCommand.JOIN_EXPORT:
            return _export_join(
                self.postgis,
                stage,
                output,
                log,
                progress_every=self.progress_every,
                batch_size=self.batch_size,
            )
        raise ValueError(f"Unsupported stage command: {stage.command}")
