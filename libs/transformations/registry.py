# =============================================================================
# Recipe Registry
# =============================================================================
# Layer-based recipe lookup for post-import steps.
# =============================================================================

from typing import List

from .base import ImportStep
from .import_steps import (
    OSM2PGSQL_TABLE_KINDS,
    AnalyzeTableStep,
    CreateAttributeIndexStep,
    DropTableStep,
)

__all__ = ["RecipeRegistry"]


class RecipeRegistry:
    """
    Registry for post-import recipes.

    A recipe keeps one osm2pgsql geometry table, drops the other three,
    indexes the attribute the join uses and refreshes statistics.
    """

    # layer -> (kept table kind, indexed column)
    LAYERS = {
        "place": ("point", "place"),
        "admin_level": ("polygon", "admin_level"),
    }

    @staticmethod
    def get_import_recipe(keep: str, index_column: str) -> List[ImportStep]:
        """
        Build the post-import recipe for a layer.

        Steps are instantiated fresh each time (no shared state).

        Args:
            keep: Geometry table kind to keep (e.g. "point")
            index_column: Tag column to index on the kept table

        Returns:
            List of ImportStep instances to execute in order

        Raises:
            ValueError: If keep is not an osm2pgsql table kind
        """
        if keep not in OSM2PGSQL_TABLE_KINDS:
            raise ValueError(
                f"Unknown osm2pgsql table kind: {keep!r}. Expected one of {OSM2PGSQL_TABLE_KINDS}"
            )

        steps: List[ImportStep] = [
            DropTableStep(kind) for kind in OSM2PGSQL_TABLE_KINDS if kind != keep
        ]
        steps.append(CreateAttributeIndexStep(keep, index_column))
        steps.append(AnalyzeTableStep(keep))
        return steps

    @classmethod
    def get_layer_recipe(cls, layer: str) -> List[ImportStep]:
        """
        Recipe for a named layer ("place" or "admin_level").

        Raises:
            ValueError: If the layer is unknown
        """
        if layer not in cls.LAYERS:
            raise ValueError(f"Unknown layer: {layer!r}. Expected one of {sorted(cls.LAYERS)}")
        keep, index_column = cls.LAYERS[layer]
        return cls.get_import_recipe(keep, index_column)
