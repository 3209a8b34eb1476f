"""Place-in-area job (op-based).

Runs the five pipeline stages in dependency order, then the report
generator. Stages whose outputs are fresh are skipped inside their op.
"""

from dagster import job

from ..ops import STAGE_OPS, generate_report, resolve_layout


@job(
    name="place_in_area_job",
    description="Filter an OSM extract, import places and admin boundaries into PostGIS, export every place/boundary containment pair and generate the distance report",
)
def place_in_area_job():
    """
    Pipeline flow:
    1. resolve_layout: Pipeline name, table prefixes and artifact paths from run config
    2. filter_places / filter_boundaries: osmium tags-filter
    3. import_places / import_boundaries: osm2pgsql + post-import indexes
    4. spatial_join_export: PostGIS containment join streamed to gzip CSV
    5. generate_report: Downstream report generator (skipped if not configured)
    """
    run_state = resolve_layout()
    for stage_op in STAGE_OPS:
        run_state = stage_op(run_state)
    generate_report(run_state)
