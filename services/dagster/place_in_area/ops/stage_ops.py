# =============================================================================
# Stage Ops - One Dagster op per pipeline stage
# =============================================================================
# Ops are generated from the stage declarations, so the job and the
# command-line driver run the same stages with the same freshness rules.
# Each op passes a small run-state dict to the next.
# =============================================================================

from pathlib import Path
from typing import Any, Dict, List, Optional

from dagster import Config, In, OpExecutionContext, Out, op
from pydantic import Field

from libs.models import StageDefinition
from libs.pipeline import (
    ArtifactStore,
    CommandExecutor,
    DependencyGraph,
    FileArtifactStore,
    PipelineLayout,
    StageRunner,
    build_place_in_area_stages,
)

from .executor import ToolchainExecutor


class PlaceInAreaConfig(Config):
    """Run config for resolve_layout."""

    input_path: str = Field(..., description="Root OSM extract")
    output_dir: str = Field(".", description="Directory for derived artifacts")
    name: Optional[str] = Field(None, description="Pipeline name override")
    style_path: Optional[str] = Field(None, description="osm2pgsql style override")
    force: bool = Field(False, description="Re-run every stage regardless of freshness")
    report_path: str = Field("distances.md", description="Report location, relative to output_dir")
    progress_every: int = Field(100000, ge=0, description="Export progress interval in rows")


def _resolve_layout(
    input_path: str,
    output_dir: str,
    log,
    name: Optional[str] = None,
    style_path: Optional[str] = None,
    force: bool = False,
    report_path: str = "distances.md",
    progress_every: int = 100000,
) -> Dict[str, Any]:
    """
    Core logic for resolve_layout.

    This function is extracted for easier unit testing without Dagster context.

    Returns:
        Run state dict: layout (JSON form), force, report_path,
        progress_every and an empty reports list

    Raises:
        ValueError: If no valid pipeline name can be derived
    """
    layout = PipelineLayout.from_input(
        input_path, output_dir, name=name, style_path=style_path
    )
    log.info(
        f"Pipeline {layout.name}: {layout.input_path} -> {layout.output_dir} "
        f"(tables {layout.place_table}, {layout.boundary_table})"
    )
    return {
        "layout": layout.model_dump(mode="json"),
        "force": force,
        "report_path": report_path,
        "progress_every": progress_every,
        "reports": [],
    }


@op(out={"run_state": Out(dagster_type=dict)})
def resolve_layout(context: OpExecutionContext, config: PlaceInAreaConfig) -> dict:
    """
    Derive the pipeline name, table prefixes and artifact locations from
    the input extract.
    """
    return _resolve_layout(
        input_path=config.input_path,
        output_dir=config.output_dir,
        log=context.log,
        name=config.name,
        style_path=config.style_path,
        force=config.force,
        report_path=config.report_path,
        progress_every=config.progress_every,
    )


def _run_stage(
    stage_name: str,
    run_state: Dict[str, Any],
    executor: CommandExecutor,
    log,
    store: Optional[ArtifactStore] = None,
) -> Dict[str, Any]:
    """
    Core logic shared by all stage ops.

    This function is extracted for easier unit testing without Dagster context.

    Args:
        stage_name: Stage to run
        run_state: Run state from the previous op
        executor: Command executor for the stage
        log: Logger instance (context.log)
        store: Artifact store (default: files under the output directory)

    Returns:
        Run state with this stage's report appended

    Raises:
        PipelineError: If the stage fails (the job stops here)
    """
    layout = PipelineLayout(**run_state["layout"])
    graph = DependencyGraph(build_place_in_area_stages(layout))
    stage = graph.stage(stage_name)

    runner = StageRunner(
        store or FileArtifactStore(layout.output_dir),
        executor,
        definition=layout.definition,
        log=log,
    )
    report = runner.run(stage, force=run_state.get("force", False))

    reports: List[dict] = list(run_state.get("reports", []))
    reports.append(report.model_dump(mode="json"))
    return {**run_state, "reports": reports}


def build_stage_op(stage: StageDefinition):
    """
    Create the Dagster op that runs one stage.

    The op is named after the stage with dashes replaced by underscores
    (e.g. filter-places -> filter_places).
    """
    stage_name = stage.name

    @op(
        name=stage_name.replace("-", "_"),
        description=stage.description or None,
        ins={"run_state": In(dagster_type=dict)},
        out={"run_state": Out(dagster_type=dict)},
        required_resource_keys={"osmium", "osm2pgsql", "postgis"},
        tags={"stage": stage_name, "command": stage.command.value},
    )
    def _stage_op(context: OpExecutionContext, run_state: dict) -> dict:
        executor = ToolchainExecutor(
            osmium=context.resources.osmium,
            osm2pgsql=context.resources.osm2pgsql,
            postgis=context.resources.postgis,
            progress_every=run_state.get("progress_every", 100000),
        )
        return _run_stage(stage_name, run_state, executor, context.log)

    return _stage_op


# Stage names and order do not depend on the input, so the ops are built once
# from a placeholder layout.
_PLACEHOLDER_LAYOUT = PipelineLayout(
    name="place_in_area",
    input_path=Path("/place_in_area.osm.pbf"),
    output_dir=Path("/"),
)

STAGE_OPS = [
    build_stage_op(stage)
    for stage in DependencyGraph(build_place_in_area_stages(_PLACEHOLDER_LAYOUT)).order
]
