"""Dagster resources wrapping the pipeline's external collaborators."""

from .cli_command import run_cli_command
from .osmium_resource import OsmiumResource
from .osm2pgsql_resource import Osm2pgsqlResource
from .postgis_resource import PostGISResource, sql_command
from .report_resource import ReportResource

__all__ = [
    "run_cli_command",
    "OsmiumResource",
    "Osm2pgsqlResource",
    "PostGISResource",
    "sql_command",
    "ReportResource",
]
