# =============================================================================
# Post-Import Steps
# =============================================================================
# Concrete SQL steps run after osm2pgsql: drop the geometry tables a layer
# does not use, index the attribute the join filters on, refresh statistics.
# =============================================================================

from libs.spatial_utils import index_name, require_identifier

from .base import ImportStep

__all__ = [
    "OSM2PGSQL_TABLE_KINDS",
    "DropTableStep",
    "CreateAttributeIndexStep",
    "AnalyzeTableStep",
]

# Tables osm2pgsql creates for every prefix
OSM2PGSQL_TABLE_KINDS = ("point", "line", "polygon", "roads")


def _require_kind(kind: str) -> str:
    if kind not in OSM2PGSQL_TABLE_KINDS:
        raise ValueError(
            f"Unknown osm2pgsql table kind: {kind!r}. Expected one of {OSM2PGSQL_TABLE_KINDS}"
        )
    return kind


def _table_name(table_prefix: str, kind: str) -> str:
    _require_kind(kind)
    require_identifier(table_prefix, label="table_prefix")
    return require_identifier(f"{table_prefix}_{kind}", label="table")


class DropTableStep(ImportStep):
    """
    Drop one of the geometry tables osm2pgsql created but the layer never uses.
    """

    def __init__(self, kind: str):
        """
        Initialize drop step.

        Args:
            kind: Geometry table kind to drop (point, line, polygon, roads)
        """
        self.kind = _require_kind(kind)

    def generate_sql(self, table_prefix: str) -> str:
        table = _table_name(table_prefix, self.kind)
        return f'DROP TABLE IF EXISTS "{table}"'


class CreateAttributeIndexStep(ImportStep):
    """
    Create a B-tree index on a tag column of the kept geometry table.

    Index names follow the ``<table>__<column>`` convention
    (e.g. ``place_point__place``).
    """

    def __init__(self, kind: str, column: str):
        """
        Initialize index step.

        Args:
            kind: Geometry table kind holding the column
            column: Tag column to index (e.g. "place", "admin_level")
        """
        require_identifier(column, label="column")
        self.kind = _require_kind(kind)
        self.column = column

    def generate_sql(self, table_prefix: str) -> str:
        table = _table_name(table_prefix, self.kind)
        index = index_name(table, self.column)
        return f'CREATE INDEX IF NOT EXISTS "{index}" ON "{table}" ("{self.column}")'


class AnalyzeTableStep(ImportStep):
    """Refresh planner statistics so the join picks the GiST index."""

    def __init__(self, kind: str):
        self.kind = _require_kind(kind)

    def generate_sql(self, table_prefix: str) -> str:
        table = _table_name(table_prefix, self.kind)
        return f'ANALYZE "{table}"'
