# =============================================================================
# Configuration Models Module
# =============================================================================
# Provides Pydantic Settings models for the pipeline's collaborators:
# - PostGISSettings: spatial store the extracts are imported into
# - ToolSettings: osmium / osm2pgsql binaries and importer options
# - PipelineSettings: output directory, report command, progress, logging
# =============================================================================

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator

__all__ = [
    "PostGISSettings",
    "ToolSettings",
    "PipelineSettings",
]


# =============================================================================
# PostGIS Settings (Spatial Store)
# =============================================================================

class PostGISSettings(BaseSettings):
    """
    Configuration for PostGIS (spatial store and query engine).

    Imported tables persist between runs; the import markers in the output
    directory record which extract they were loaded from.

    Maps environment variables with prefix "POSTGRES_":
    - POSTGRES_HOST → host
    - POSTGRES_PORT → port
    - POSTGRES_USER → user
    - POSTGRES_PASSWORD → password
    - POSTGRES_DB → database

    Attributes:
        host: PostGIS host (default: "localhost")
        port: PostGIS port (default: 5432)
        user: PostgreSQL user (default: "postgres")
        password: PostgreSQL password (default: empty, i.e. rely on .pgpass/trust)
        database: Database name (default: "gis")
    """

    host: str = Field("localhost", validation_alias="POSTGRES_HOST", description="PostGIS host")
    port: int = Field(5432, validation_alias="POSTGRES_PORT", description="PostGIS port")
    user: str = Field("postgres", validation_alias="POSTGRES_USER", description="PostgreSQL user")
    password: str = Field("", validation_alias="POSTGRES_PASSWORD", description="PostgreSQL password")
    database: str = Field("gis", validation_alias="POSTGRES_DB", description="Database name")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",  # Ignore unrelated env vars from shared .env files
    )

    @property
    def connection_string(self) -> str:
        """
        Build PostgreSQL connection URI.

        Format: postgresql://[user]:[password]@[host]:[port]/[database]

        Returns:
            PostgreSQL connection URI string
        """
        return (
            f"postgresql://{self.user}:{self.password}@"
            f"{self.host}:{self.port}/{self.database}"
        )


# =============================================================================
# Tool Settings (osmium / osm2pgsql)
# =============================================================================

class ToolSettings(BaseSettings):
    """
    Configuration for the OSM command-line tools.

    Maps environment variables:
    - OSMIUM_BIN → osmium_bin
    - OSM2PGSQL_BIN → osm2pgsql_bin
    - OSM2PGSQL_STYLE → osm2pgsql_style (empty: use the bundled style)
    - OSM2PGSQL_CACHE_MB → osm2pgsql_cache_mb
    - OSM2PGSQL_PROCESSES → osm2pgsql_processes

    Attributes:
        osmium_bin: osmium executable (default: "osmium")
        osm2pgsql_bin: osm2pgsql executable (default: "osm2pgsql")
        osm2pgsql_style: Path to an osm2pgsql style file (optional)
        osm2pgsql_cache_mb: Node cache size in MB (optional)
        osm2pgsql_processes: Number of import processes (optional)
    """

    osmium_bin: str = Field("osmium", validation_alias="OSMIUM_BIN", description="osmium executable")
    osm2pgsql_bin: str = Field("osm2pgsql", validation_alias="OSM2PGSQL_BIN", description="osm2pgsql executable")
    osm2pgsql_style: str = Field("", validation_alias="OSM2PGSQL_STYLE", description="osm2pgsql style file")
    osm2pgsql_cache_mb: Optional[int] = Field(None, ge=0, validation_alias="OSM2PGSQL_CACHE_MB", description="Node cache (MB)")
    osm2pgsql_processes: Optional[int] = Field(None, ge=1, validation_alias="OSM2PGSQL_PROCESSES", description="Import processes")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# =============================================================================
# Pipeline Settings
# =============================================================================

class PipelineSettings(BaseSettings):
    """
    Configuration for the pipeline driver.

    Maps environment variables with prefix "PLACE_IN_AREA_":
    - PLACE_IN_AREA_OUTPUT_DIR → output_dir
    - PLACE_IN_AREA_REPORT_COMMAND → report_command
    - PLACE_IN_AREA_REPORT_PATH → report_path
    - PLACE_IN_AREA_PROGRESS_EVERY → progress_every
    - PLACE_IN_AREA_LOG_LEVEL → log_level

    Attributes:
        output_dir: Directory holding extracts, markers and exports (default: ".")
        report_command: Downstream report generator, invoked as
            ``<command> <export_path> <report_path>`` (empty: no report)
        report_path: Report location, relative to output_dir (default: "distances.md")
        progress_every: Log a progress line every N exported rows
        log_level: Logging level name
    """

    output_dir: Path = Field(Path("."), validation_alias="PLACE_IN_AREA_OUTPUT_DIR", description="Output directory")
    report_command: str = Field("", validation_alias="PLACE_IN_AREA_REPORT_COMMAND", description="Report generator command")
    report_path: str = Field("distances.md", validation_alias="PLACE_IN_AREA_REPORT_PATH", description="Report location")
    progress_every: int = Field(100_000, ge=1, validation_alias="PLACE_IN_AREA_PROGRESS_EVERY", description="Progress interval (rows)")
    log_level: str = Field("INFO", validation_alias="PLACE_IN_AREA_LOG_LEVEL", description="Logging level")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level
