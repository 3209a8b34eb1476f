# =============================================================================
# Join Row Model
# =============================================================================
# One (place, enclosing boundary) pair from the containment join, and its
# CSV representation in the place-in-area export.
# =============================================================================

from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, Field

from libs.spatial_utils import OsmIdentity, OsmType

__all__ = ["JOIN_EXPORT_COLUMNS", "JoinRow", "resolve_name", "parse_admin_level"]

# Header row of the export, in column order
JOIN_EXPORT_COLUMNS = (
    "place_osmtype",
    "place_id",
    "place_name",
    "place_type",
    "place_lat",
    "place_lon",
    "boundary_osmtype",
    "boundary_id",
    "boundary_name",
    "boundary_admin_level",
)


def resolve_name(name_en: Optional[str], name: Optional[str]) -> Optional[str]:
    """
    Pick the display name for a feature: English name, else local name.

    Empty strings count as absent. Returns None when neither tag is set.
    """
    if name_en:
        return name_en
    if name:
        return name
    return None


def parse_admin_level(value: Any) -> Optional[int]:
    """
    Parse an admin_level tag value.

    osm2pgsql stores the tag as text, so values such as "4;6" or "yes" occur
    in real data. Anything that is not a plain integer yields None.
    """
    if value is None:
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text.lstrip("-").isdigit():
        return None
    return int(text)


class JoinRow(BaseModel):
    """
    A place point together with one boundary polygon that contains it.

    A place nested in several boundaries (e.g. city and country) yields one
    JoinRow per enclosing boundary.

    Attributes:
        place_osmtype: Always NODE (places are imported from point tables)
        place_id: OSM node id
        place_name: English name if tagged, else local name, else None
        place_type: Value of the place=* tag
        place_lat: Latitude (WGS84)
        place_lon: Longitude (WGS84)
        boundary_osmtype: WAY or RELATION, recovered from the signed id
        boundary_id: Unsigned OSM id of the boundary
        boundary_name: English name if tagged, else local name, else None
        boundary_admin_level: admin_level=* as an integer, None if not numeric
    """

    place_osmtype: OsmType = Field(OsmType.NODE, description="OSM type of the place")
    place_id: int = Field(..., ge=0, description="OSM node id of the place")
    place_name: Optional[str] = Field(None, description="Place display name")
    place_type: Optional[str] = Field(None, description="place=* tag value")
    place_lat: float = Field(..., description="Latitude")
    place_lon: float = Field(..., description="Longitude")
    boundary_osmtype: OsmType = Field(..., description="OSM type of the boundary")
    boundary_id: int = Field(..., ge=0, description="Unsigned OSM id of the boundary")
    boundary_name: Optional[str] = Field(None, description="Boundary display name")
    boundary_admin_level: Optional[int] = Field(None, description="admin_level=* value")

    @classmethod
    def from_store_record(cls, record: Mapping[str, Any]) -> "JoinRow":
        """
        Build a JoinRow from one row of the containment join query.

        Expects the columns selected by PlaceInAreaJoinQuery: raw osm ids,
        ``name`` and ``name:en`` for both sides, place tag, coordinates and
        admin level.
        """
        place = OsmIdentity.from_point_id(record["place_osm_id"])
        boundary = OsmIdentity.from_polygon_id(record["boundary_osm_id"])

        return cls(
            place_osmtype=place.osm_type,
            place_id=place.osm_id,
            place_name=resolve_name(record.get("place_name_en"), record.get("place_name")),
            place_type=record.get("place_type"),
            place_lat=record["place_lat"],
            place_lon=record["place_lon"],
            boundary_osmtype=boundary.osm_type,
            boundary_id=boundary.osm_id,
            boundary_name=resolve_name(
                record.get("boundary_name_en"), record.get("boundary_name")
            ),
            boundary_admin_level=parse_admin_level(record.get("boundary_admin_level")),
        )

    def to_csv_row(self) -> List[Any]:
        """Values in JOIN_EXPORT_COLUMNS order; None is written as an empty field."""
        return [
            self.place_osmtype.value,
            self.place_id,
            self.place_name,
            self.place_type,
            self.place_lat,
            self.place_lon,
            self.boundary_osmtype.value,
            self.boundary_id,
            self.boundary_name,
            self.boundary_admin_level,
        ]
