# =============================================================================
# Base Classes for SQL Steps
# =============================================================================
# Abstract base classes for the SQL run against osm2pgsql-imported tables.
# =============================================================================

from abc import ABC, abstractmethod

__all__ = ["ImportStep", "QueryStep"]


class ImportStep(ABC):
    """
    Base class for post-import maintenance steps.

    osm2pgsql creates one table per geometry kind under a table prefix
    (``<prefix>_point``, ``<prefix>_line``, ``<prefix>_polygon``,
    ``<prefix>_roads``). Each step generates one SQL statement against those
    tables, executed in order after the importer exits successfully.
    """

    @abstractmethod
    def generate_sql(self, table_prefix: str) -> str:
        """
        Generate SQL for this step.

        Args:
            table_prefix: osm2pgsql table prefix of the import

        Returns:
            SQL string to execute
        """
        pass

    def describe(self, table_prefix: str) -> str:
        """One-line description for logs."""
        return self.generate_sql(table_prefix).strip().splitlines()[0]


class QueryStep(ABC):
    """
    Base class for read-only queries whose rows are streamed out of PostGIS.
    """

    @abstractmethod
    def generate_sql(self, place_table: str, boundary_table: str) -> str:
        """
        Generate the SELECT statement.

        Args:
            place_table: Table holding place points
            boundary_table: Table holding boundary polygons

        Returns:
            SQL string to execute
        """
        pass
