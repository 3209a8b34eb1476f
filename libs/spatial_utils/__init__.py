# =============================================================================
# Spatial Utils Library
# =============================================================================
# OSM identity and PostgreSQL naming helpers shared by the pipeline,
# the SQL steps and the Dagster resources.
# =============================================================================

"""
Spatial utilities for the place-in-area pipeline.

This library provides:
- OsmType / OsmIdentity: osm2pgsql signed-id <-> OSM (type, id) conversion
- Naming helpers: pipeline names from extract filenames, table prefixes,
  identifier validation
"""

from .osm_identity import OsmIdentity, OsmType
from .naming import (
    IDENTIFIER_RE,
    KNOWN_EXTRACT_SUFFIXES,
    MAX_IDENTIFIER_LENGTH,
    index_name,
    pipeline_name_from_path,
    require_identifier,
    table_prefix_for,
)

__version__ = "0.1.0"

__all__ = [
    "OsmIdentity",
    "OsmType",
    "IDENTIFIER_RE",
    "KNOWN_EXTRACT_SUFFIXES",
    "MAX_IDENTIFIER_LENGTH",
    "index_name",
    "pipeline_name_from_path",
    "require_identifier",
    "table_prefix_for",
]
