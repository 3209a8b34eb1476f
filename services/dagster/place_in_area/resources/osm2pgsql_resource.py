# =============================================================================
# osm2pgsql Resource - CLI wrapper for OSM imports into PostGIS
# =============================================================================
# Provides a thin, stateless wrapper around osm2pgsql's pgsql output.
# =============================================================================

from typing import Dict, Optional

from dagster import ConfigurableResource
from pydantic import Field

from libs.pipeline import CommandResult

from .cli_command import run_cli_command

__all__ = ["Osm2pgsqlResource"]


class Osm2pgsqlResource(ConfigurableResource):
    """
    Dagster resource for osm2pgsql imports.

    Imports are always lat/lon (EPSG:4326), slim with dropped middle tables,
    so a re-import replaces the previous tables under the same prefix.

    Configuration:
        binary: osm2pgsql executable name or path
        cache_mb: Node cache size in MB (optional, osm2pgsql default otherwise)
        number_processes: Parallel import processes (optional)

    Example:
        >>> osm2pgsql = Osm2pgsqlResource(cache_mb=2000)
        >>> result = osm2pgsql.import_extract(
        ...     input_path="/data/out/ireland.place.osm.pbf",
        ...     prefix="ireland_place",
        ...     style_path="/opt/place_in_area.style",
        ...     connection={"database": "gis", "host": "localhost",
        ...                 "port": "5432", "user": "postgres", "password": ""},
        ... )
    """

    binary: str = Field("osm2pgsql", description="osm2pgsql executable")
    cache_mb: Optional[int] = Field(None, description="Node cache size in MB")
    number_processes: Optional[int] = Field(None, description="Parallel import processes")

    def import_extract(
        self,
        input_path: str,
        prefix: str,
        style_path: str,
        connection: Dict[str, str],
    ) -> CommandResult:
        """
        Import an OSM file into ``<prefix>_point/_line/_polygon/_roads``.

        Args:
            input_path: OSM file to import
            prefix: Table prefix
            style_path: osm2pgsql style file
            connection: Keys database, host, port, user, password. The
                password is passed through PGPASSWORD, never on the command line.

        Returns:
            CommandResult with command execution details and success status
        """
        cmd = [
            self.binary,
            "--latlong",
            "--style", style_path,
            "--slim",
            "--drop",
            "--prefix", prefix,
        ]
        if self.cache_mb is not None:
            cmd.extend(["--cache", str(self.cache_mb)])
        if self.number_processes is not None:
            cmd.extend(["--number-processes", str(self.number_processes)])

        cmd.extend([
            "--database", connection["database"],
            "--host", connection["host"],
            "--port", str(connection["port"]),
            "--username", connection["user"],
        ])
        cmd.append(input_path)

        env_overrides = {}
        if connection.get("password"):
            env_overrides["PGPASSWORD"] = connection["password"]

        return run_cli_command(cmd, env_overrides=env_overrides)

    def version(self) -> CommandResult:
        """Report the installed osm2pgsql version."""
        return run_cli_command([self.binary, "--version"])
