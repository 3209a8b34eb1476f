# =============================================================================
# Join Export Step - PostGIS containment join to compressed CSV
# =============================================================================
# Streams the place/boundary join out of PostGIS through a CSV writer into a
# gzip file. Rows are never collected in memory.
# =============================================================================

import csv
import gzip
import io
from pathlib import Path

from libs.models import JOIN_EXPORT_COLUMNS, JoinRow, StageDefinition
from libs.pipeline import CommandResult, PartialStreamError
from libs.transformations import PlaceInAreaJoinQuery

from ..resources import sql_command

# Rows fetched per server-side cursor round trip
DEFAULT_BATCH_SIZE = 10000


def _write_join_rows(rows, output: Path, log, progress_every: int) -> int:
    """
    Write join records as gzip-compressed CSV.

    The gzip header carries no filename or timestamp, so identical rows
    produce identical bytes.

    Returns:
        Number of data rows written
    """
    rows_written = 0
    with open(output, "wb") as raw, gzip.GzipFile(
        filename="", mode="wb", fileobj=raw, mtime=0
    ) as compressed, io.TextIOWrapper(compressed, encoding="utf-8", newline="") as text:
        writer = csv.writer(text)
        writer.writerow(JOIN_EXPORT_COLUMNS)
        for record in rows:
            writer.writerow(JoinRow.from_store_record(record).to_csv_row())
            rows_written += 1
            if progress_every and rows_written % progress_every == 0:
                log.info(f"  {rows_written:,} rows written")
    return rows_written


def _export_join(
    postgis,
    stage: StageDefinition,
    output: Path,
    log,
    progress_every: int = 100000,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> CommandResult:
    """
    Core logic for the spatial join export stage.

    This function is extracted for easier unit testing without Dagster context.

    Args:
        postgis: PostGISResource instance
        stage: Stage with ``params["place_table"]`` and ``params["boundary_table"]``
        output: Staging path to write; the runner renames it into place
        log: Logger instance (context.log)
        progress_every: Log progress every N rows (0 disables)
        batch_size: Server-side cursor batch size

    Returns:
        Successful CommandResult with rows_written, or a failed result if
        an imported table is missing

    Raises:
        PartialStreamError: If the query or the write fails part way
    """
    place_table = stage.params["place_table"]
    boundary_table = stage.params["boundary_table"]
    sql = PlaceInAreaJoinQuery().generate_sql(place_table, boundary_table)

    for table in (place_table, boundary_table):
        if not postgis.table_exists(table):
            # Marker present but table gone: re-import with --force
            return CommandResult(
                success=False,
                command=sql_command(sql),
                stdout="",
                stderr=f"Table {table} does not exist",
                return_code=1,
            )

    log.info(f"Joining {place_table} with {boundary_table} into {output.name}")
    rows_written = 0

    def counted(rows):
        nonlocal rows_written
        for row in rows:
            yield row
            rows_written += 1

    try:
        _write_join_rows(
            counted(postgis.stream_rows(sql, batch_size=batch_size)),
            output,
            log,
            progress_every,
        )
    except Exception as e:
        log.error(f"Export stream failed after {rows_written:,} rows: {e}")
        raise PartialStreamError(stage.name, rows_written) from e

    log.info(f"Wrote {rows_written:,} place/boundary rows")
    return CommandResult(
        success=True,
        command=sql_command(sql),
        stdout="",
        stderr="",
        return_code=0,
        output_path=str(output),
        rows_written=rows_written,
    )
