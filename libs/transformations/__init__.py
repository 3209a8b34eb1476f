# =============================================================================
# Transformations Library
# =============================================================================
# SQL steps run against osm2pgsql-imported tables.
# =============================================================================

"""
Transformations library for the place-in-area pipeline.

This library provides:
- ImportStep / QueryStep: base classes for generated SQL
- Post-import steps: DropTableStep, CreateAttributeIndexStep, AnalyzeTableStep
- PlaceInAreaJoinQuery: the place/boundary containment join
- RecipeRegistry: per-layer post-import recipes
"""

from .base import ImportStep, QueryStep
from .import_steps import (
    OSM2PGSQL_TABLE_KINDS,
    AnalyzeTableStep,
    CreateAttributeIndexStep,
    DropTableStep,
)
from .join import PlaceInAreaJoinQuery
from .registry import RecipeRegistry

__all__ = [
    "ImportStep",
    "QueryStep",
    "OSM2PGSQL_TABLE_KINDS",
    "AnalyzeTableStep",
    "CreateAttributeIndexStep",
    "DropTableStep",
    "PlaceInAreaJoinQuery",
    "RecipeRegistry",
]
