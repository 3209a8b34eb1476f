# =============================================================================
# Import Step - osm2pgsql import + post-import recipe
# =============================================================================
# Imports a filtered extract under a table prefix, then drops the geometry
# tables the layer does not need, indexes the joined attribute and refreshes
# planner statistics.
# =============================================================================

from pathlib import Path
from typing import Sequence

from sqlalchemy.exc import SQLAlchemyError

from libs.models import StageDefinition
from libs.pipeline import CommandResult
from libs.transformations import RecipeRegistry

from ..resources import sql_command


def _run_import_recipe(postgis, layer: str, table_prefix: str, log) -> CommandResult:
    """
    Execute the post-import recipe of a layer, one statement at a time.

    Returns:
        CommandResult of the last statement; on a database error, a failed
        result naming the statement that broke
    """
    recipe = RecipeRegistry.get_layer_recipe(layer)
    executed: list[str] = []
    for step in recipe:
        sql = step.generate_sql(table_prefix)
        log.info(f"  {step.describe(table_prefix)}")
        try:
            postgis.execute_sql(sql)
        except SQLAlchemyError as e:
            return CommandResult(
                success=False,
                command=sql_command(sql),
                stdout="",
                stderr=str(e),
                return_code=1,
            )
        executed.append(sql)

    return CommandResult(
        success=True,
        command=sql_command(";\n".join(executed)),
        stdout="",
        stderr="",
        return_code=0,
    )


def _import_extract(
    osm2pgsql,
    postgis,
    stage: StageDefinition,
    inputs: Sequence[Path],
    output: Path,
    log,
) -> CommandResult:
    """
    Core logic for an import stage.

    This function is extracted for easier unit testing without Dagster context.

    Args:
        osm2pgsql: Osm2pgsqlResource instance
        postgis: PostGISResource instance (target database)
        stage: Stage with ``params["table_prefix"]`` and ``params["layer"]``
        inputs: Resolved inputs; the extract first, then the style file
        output: Marker path (touched by the runner, not written here)
        log: Logger instance (context.log)

    Returns:
        Failed osm2pgsql result, failed recipe result, or the successful
        osm2pgsql result
    """
    table_prefix = stage.params["table_prefix"]
    layer = stage.params["layer"]
    extract, style = inputs[0], inputs[1]

    log.info(f"Importing {extract.name} as {table_prefix}_*")
    result = osm2pgsql.import_extract(
        input_path=str(extract),
        prefix=table_prefix,
        style_path=str(style),
        connection=postgis.connection_args(),
    )
    if not result.success:
        return result

    log.info(f"Preparing {layer} tables")
    recipe_result = _run_import_recipe(postgis, layer, table_prefix, log)
    if not recipe_result.success:
        return recipe_result
    return result
