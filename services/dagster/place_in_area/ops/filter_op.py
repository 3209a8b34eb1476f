# =============================================================================
# Filter Step - osmium tags-filter
# =============================================================================
# Extracts the objects one layer needs from the root OSM extract.
# =============================================================================

from pathlib import Path
from typing import Sequence

from libs.models import StageDefinition
from libs.pipeline import CommandResult


def _filter_extract(
    osmium,
    stage: StageDefinition,
    inputs: Sequence[Path],
    output: Path,
    log,
) -> CommandResult:
    """
    Core logic for a tag-filter stage.

    This function is extracted for easier unit testing without Dagster context.

    Args:
        osmium: OsmiumResource instance
        stage: Stage with ``params["filters"]``
        inputs: Resolved inputs; the first is the extract to filter
        output: Where osmium writes the filtered extract
        log: Logger instance (context.log)

    Returns:
        CommandResult from osmium

    Raises:
        ValueError: If the stage declares no filter expressions
    """
    filters = stage.params.get("filters") or []
    if not filters:
        raise ValueError(f"Stage {stage.name} declares no filter expressions")

    source = inputs[0]
    log.info(f"Filtering {source.name} with {' '.join(filters)}")
    result = osmium.tags_filter(
        input_path=str(source),
        output_path=str(output),
        filters=filters,
    )
    if result.success and result.stderr:
        log.debug(result.stderr.strip())
    return result
