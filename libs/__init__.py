# =============================================================================
# Place-in-Area Shared Libraries
# =============================================================================
# This package contains shared libraries for the place-in-area pipeline.
# See individual sub-packages for detailed documentation.
# =============================================================================

"""
Place-in-area shared libraries.

Sub-packages:
- models: Pydantic data models and schemas
- spatial_utils: OSM identifiers and PostgreSQL naming
- transformations: SQL run against osm2pgsql tables
- pipeline: artifact store, stage runner, dependency graph, driver
"""

__version__ = "0.1.0"
