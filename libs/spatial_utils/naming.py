# =============================================================================
# Naming Module
# =============================================================================
# Derives pipeline names from input extract filenames and turns them into
# PostgreSQL-safe table prefixes for osm2pgsql imports.
# =============================================================================

import hashlib
import re
from pathlib import Path
from typing import Union

__all__ = [
    "IDENTIFIER_RE",
    "KNOWN_EXTRACT_SUFFIXES",
    "MAX_IDENTIFIER_LENGTH",
    "index_name",
    "pipeline_name_from_path",
    "require_identifier",
    "table_prefix_for",
]

IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# PostgreSQL truncates identifiers longer than this (NAMEDATALEN - 1)
MAX_IDENTIFIER_LENGTH = 63

# Longest first, so ".osm.pbf" wins over ".pbf"
KNOWN_EXTRACT_SUFFIXES = (
    ".osm.pbf",
    ".osm.bz2",
    ".osm.gz",
    ".o5m",
    ".pbf",
    ".osm",
)

# osm2pgsql appends _point, _line, _polygon, _roads to its prefix
_OSM2PGSQL_LONGEST_SUFFIX = "_polygon"


def require_identifier(name: str, *, label: str) -> str:
    """
    Validate that a name is usable as an unquoted PostgreSQL identifier.

    Args:
        name: Identifier to validate
        label: What the identifier is (for error messages)

    Returns:
        The identifier, unchanged

    Raises:
        ValueError: If the identifier is invalid or too long
    """
    if not IDENTIFIER_RE.match(name):
        raise ValueError(
            f"Invalid {label}: {name!r}. Must match: {IDENTIFIER_RE.pattern}"
        )
    if len(name) > MAX_IDENTIFIER_LENGTH:
        raise ValueError(
            f"Invalid {label}: {name!r} is longer than {MAX_IDENTIFIER_LENGTH} characters"
        )
    return name


def pipeline_name_from_path(path: Union[str, Path]) -> str:
    """
    Derive the logical pipeline name from an input extract filename.

    Strips the first matching known extract suffix (case-insensitive).

    Example:
        >>> pipeline_name_from_path("/data/ireland-and-northern-ireland-latest.osm.pbf")
        'ireland-and-northern-ireland-latest'

    Raises:
        ValueError: If nothing is left once the suffix is removed
    """
    filename = Path(path).name
    lowered = filename.lower()
    for suffix in KNOWN_EXTRACT_SUFFIXES:
        if lowered.endswith(suffix):
            filename = filename[: -len(suffix)]
            break

    if not filename:
        raise ValueError(f"Cannot derive a pipeline name from {str(path)!r}")
    return filename


def _slugify(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "_", name.lower()).strip("_")
    if not slug:
        raise ValueError(f"Cannot derive a table prefix from {name!r}")
    if slug[0].isdigit():
        slug = f"osm_{slug}"
    return slug


def table_prefix_for(pipeline_name: str, layer: str) -> str:
    """
    Build the osm2pgsql table prefix for one layer of a pipeline.

    The prefix is ``<slug>_<layer>``. Slugs that would push osm2pgsql's table
    names past the identifier limit are shortened and suffixed with a short
    hash of the full pipeline name, so distinct long names stay distinct.

    Example:
        >>> table_prefix_for("ireland-and-northern-ireland-latest", "place")
        'ireland_and_northern_ireland_latest_place'

    Args:
        pipeline_name: Logical pipeline name
        layer: Layer suffix (e.g. "place", "admin_level")

    Returns:
        Validated table prefix
    """
    require_identifier(layer, label="layer")
    slug = _slugify(pipeline_name)

    budget = MAX_IDENTIFIER_LENGTH - len(_OSM2PGSQL_LONGEST_SUFFIX) - len(layer) - 1
    if len(slug) > budget:
        digest = hashlib.sha256(pipeline_name.encode("utf-8")).hexdigest()[:8]
        slug = f"{slug[: budget - len(digest) - 1].rstrip('_')}_{digest}"

    return require_identifier(f"{slug}_{layer}", label="table prefix")


def index_name(table: str, column: str) -> str:
    """Index name in the ``<table>__<column>`` convention, clipped to the identifier limit."""
    return f"{table}__{column}"[:MAX_IDENTIFIER_LENGTH]
