# =============================================================================
# Place-in-Area Join Query
# =============================================================================
# Containment join of place points against admin boundary polygons.
# =============================================================================

from libs.spatial_utils import require_identifier

from .base import QueryStep

__all__ = ["PlaceInAreaJoinQuery"]


class PlaceInAreaJoinQuery(QueryStep):
    """
    Pair every place point with every boundary polygon that contains it.

    The ``&&`` bounding-box test lets PostGIS prune candidates through the
    GiST index osm2pgsql builds on ``way`` before running the exact
    ST_Contains test. Points on a boundary's edge follow ST_Contains
    semantics (not contained).

    Names and ids are selected raw; JoinRow resolves the name fallback and
    the signed boundary id.
    """

    def __init__(self, geom_column: str = "way"):
        """
        Initialize join query.

        Args:
            geom_column: Geometry column of both tables (osm2pgsql uses "way")
        """
        self.geom_column = require_identifier(geom_column, label="geom_column")

    def generate_sql(self, place_table: str, boundary_table: str) -> str:
        """
        Generate the containment join.

        Raises:
            ValueError: If a table name is not a valid identifier
        """
        require_identifier(place_table, label="place_table")
        require_identifier(boundary_table, label="boundary_table")
        geom = self.geom_column

        return f"""
        SELECT
            place.osm_id AS place_osm_id,
            place.name AS place_name,
            place."name:en" AS place_name_en,
            place.place AS place_type,
            ST_Y(place.{geom}) AS place_lat,
            ST_X(place.{geom}) AS place_lon,
            boundary.osm_id AS boundary_osm_id,
            boundary.name AS boundary_name,
            boundary."name:en" AS boundary_name_en,
            boundary.admin_level AS boundary_admin_level
        FROM "{place_table}" AS place
        JOIN "{boundary_table}" AS boundary
            ON (
                boundary.{geom} && place.{geom}
                AND ST_Contains(boundary.{geom}, place.{geom})
            )
        """
