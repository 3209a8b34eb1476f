# =============================================================================
# Unit Tests: Naming helpers
# =============================================================================

import pytest

from libs.spatial_utils import (
    MAX_IDENTIFIER_LENGTH,
    index_name,
    pipeline_name_from_path,
    require_identifier,
    table_prefix_for,
)


# =============================================================================
# Test: pipeline_name_from_path
# =============================================================================

@pytest.mark.parametrize(
    "path,expected",
    [
        ("/data/ireland-and-northern-ireland-latest.osm.pbf", "ireland-and-northern-ireland-latest"),
        ("monaco.pbf", "monaco"),
        ("planet.osm.bz2", "planet"),
        ("extract.osm", "extract"),
        ("Andorra.OSM.PBF", "Andorra"),
        ("notes.txt", "notes.txt"),
    ],
)
def test_pipeline_name_strips_known_suffix(path, expected):
    assert pipeline_name_from_path(path) == expected


def test_pipeline_name_strips_only_one_suffix():
    assert pipeline_name_from_path("x.osm.osm.pbf") == "x.osm"


def test_pipeline_name_rejects_bare_suffix():
    with pytest.raises(ValueError, match="Cannot derive"):
        pipeline_name_from_path("/data/.osm.pbf")


# =============================================================================
# Test: table_prefix_for
# =============================================================================

def test_table_prefix_slugifies_name():
    assert table_prefix_for("ireland-and-northern-ireland-latest", "place") == (
        "ireland_and_northern_ireland_latest_place"
    )
    assert table_prefix_for("Baden.Württemberg", "admin_level") == "baden_w_rttemberg_admin_level"


def test_table_prefix_guards_leading_digit():
    assert table_prefix_for("2024-extract", "place") == "osm_2024_extract_place"


def test_table_prefix_leaves_room_for_osm2pgsql_suffixes():
    name = "a-very-long-regional-extract-name-that-keeps-going-and-going-and-going"
    prefix = table_prefix_for(name, "admin_level")

    assert len(f"{prefix}_polygon") <= MAX_IDENTIFIER_LENGTH
    assert prefix.endswith("_admin_level")


def test_long_names_stay_distinct():
    base = "a-very-long-regional-extract-name-that-keeps-going-and-going-"
    first = table_prefix_for(base + "north", "place")
    second = table_prefix_for(base + "south", "place")

    assert first != second


def test_table_prefix_rejects_unusable_name():
    with pytest.raises(ValueError, match="table prefix"):
        table_prefix_for("---", "place")


def test_table_prefix_rejects_bad_layer():
    with pytest.raises(ValueError, match="layer"):
        table_prefix_for("ireland", "admin level")


# =============================================================================
# Test: require_identifier / index_name
# =============================================================================

def test_require_identifier_accepts_valid():
    assert require_identifier("ireland_place_point", label="table") == "ireland_place_point"


@pytest.mark.parametrize("name", ["", "1abc", "has space", 'quote"d', "semi;colon"])
def test_require_identifier_rejects_invalid(name):
    with pytest.raises(ValueError, match="Invalid table"):
        require_identifier(name, label="table")


def test_require_identifier_rejects_too_long():
    with pytest.raises(ValueError, match="longer than"):
        require_identifier("a" * (MAX_IDENTIFIER_LENGTH + 1), label="table")


def test_index_name_convention():
    assert index_name("ireland_place_point", "place") == "ireland_place_point__place"


def test_index_name_clipped():
    assert len(index_name("t" * 60, "admin_level")) == MAX_IDENTIFIER_LENGTH
