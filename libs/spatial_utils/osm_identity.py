# =============================================================================
# OSM Identity - Combined ID to (type, id) Mapping
# =============================================================================
# osm2pgsql stores polygons built from ways and from multipolygon/boundary
# relations in the same table. Relation ids are stored negated, so the sign
# of the stored osm_id carries the original OSM object type.
# =============================================================================

from enum import Enum

from pydantic import BaseModel, Field

__all__ = ["OsmType", "OsmIdentity"]


class OsmType(str, Enum):
    """OSM object type, valued with the single-letter code used in exports."""

    NODE = "n"
    WAY = "w"
    RELATION = "r"


class OsmIdentity(BaseModel):
    """
    Bidirectional mapping between an osm2pgsql combined id and an OSM identity.

    Attributes:
        osm_type: Original OSM object type
        osm_id: Unsigned OSM id

    Example:
        >>> identity = OsmIdentity.from_polygon_id(-12345)
        >>> identity.osm_type, identity.osm_id
        (<OsmType.RELATION: 'r'>, 12345)
    """

    osm_type: OsmType = Field(..., description="Original OSM object type")
    osm_id: int = Field(..., ge=0, description="Unsigned OSM id")

    model_config = {"frozen": True}

    @classmethod
    def from_polygon_id(cls, combined_id: int) -> "OsmIdentity":
        """
        Recover the OSM identity of a row in an osm2pgsql polygon table.

        Negative ids are relations, everything else is a way.

        Args:
            combined_id: Signed osm_id column value

        Returns:
            OsmIdentity with the type and unsigned id
        """
        combined_id = int(combined_id)
        if combined_id < 0:
            return cls(osm_type=OsmType.RELATION, osm_id=-combined_id)
        return cls(osm_type=OsmType.WAY, osm_id=combined_id)

    @classmethod
    def from_point_id(cls, osm_id: int) -> "OsmIdentity":
        """Point tables only ever hold nodes."""
        return cls(osm_type=OsmType.NODE, osm_id=int(osm_id))
