"""Dagster Definitions - Repository Configuration.

Defines the place-in-area job, the toolchain health check and the resources
they run against.
"""

from typing import Any, Dict

from dagster import Definitions, EnvVar, define_asset_job

from libs.models import PipelineSettings, ToolSettings

from .assets import osm_toolchain_health_check
from .jobs import place_in_area_job
from .resources import (
    Osm2pgsqlResource,
    OsmiumResource,
    PostGISResource,
    ReportResource,
)


# =============================================================================
# Asset Jobs
# =============================================================================

osm_toolchain_health_check_job = define_asset_job(
    "osm_toolchain_health_check_job",
    selection=[osm_toolchain_health_check],
    description="Health check for osmium, osm2pgsql and PostGIS",
)


# =============================================================================
# Resources
# =============================================================================

def build_place_in_area_resources() -> Dict[str, Any]:
    """
    Resources for the place-in-area job and the health check.

    Tool binaries and the optional report command come from the same
    settings the command-line driver reads, so unset variables fall back to
    their defaults. Database credentials are required and resolved by Dagster
    at launch.
    """
    tools = ToolSettings()
    pipeline = PipelineSettings()
    return {
        "osmium": OsmiumResource(binary=tools.osmium_bin),
        "osm2pgsql": Osm2pgsqlResource(
            binary=tools.osm2pgsql_bin,
            cache_mb=tools.osm2pgsql_cache_mb,
            number_processes=tools.osm2pgsql_processes,
        ),
        "postgis": PostGISResource(
            host=EnvVar("POSTGRES_HOST"),
            user=EnvVar("POSTGRES_USER"),
            password=EnvVar("POSTGRES_PASSWORD"),
            port=5432,
            database=EnvVar("POSTGRES_DB"),
        ),
        "report": ReportResource(command=pipeline.report_command),
    }


# =============================================================================
# Definitions
# =============================================================================

defs = Definitions(
    assets=[osm_toolchain_health_check],
    jobs=[
        osm_toolchain_health_check_job,
        place_in_area_job,
    ],
    resources=build_place_in_area_resources(),
)
