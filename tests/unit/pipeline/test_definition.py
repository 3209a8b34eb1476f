# =============================================================================
# Unit Tests: Place-in-area pipeline definition
# =============================================================================

from pathlib import Path

import pytest

from libs.models import ArtifactKind, StageCommand
from libs.pipeline import (
    DEFAULT_STYLE_PATH,
    DEFINITION_PATH,
    EXPORT_LOGIC_PATHS,
    IMPORT_LOGIC_PATHS,
    PipelineLayout,
    build_place_in_area_stages,
)


def test_layout_from_input(layout):
    assert layout.name == "ireland"
    assert layout.input_path == Path("/data/ireland.osm.pbf")
    assert layout.output_dir == Path("/data/out")
    assert layout.style_path == DEFAULT_STYLE_PATH


def test_layout_name_override():
    layout = PipelineLayout.from_input("/data/planet-latest.osm.pbf", "/out", name="planet")

    assert layout.name == "planet"
    assert layout.place_table == "planet_place_point"


def test_layout_rejects_unusable_name():
    with pytest.raises(ValueError):
        PipelineLayout.from_input("/data/---.osm.pbf", "/out")


def test_table_names(layout):
    assert layout.place_table_prefix == "ireland_place"
    assert layout.boundary_table_prefix == "ireland_admin_level"
    assert layout.place_table == "ireland_place_point"
    assert layout.boundary_table == "ireland_admin_level_polygon"


def test_artifact_locations(layout):
    assert layout.place_extract.path == "ireland.place.osm.pbf"
    assert layout.boundary_extract.path == "ireland.admin_level.osm.pbf"
    assert layout.place_marker.path == ".ireland.place_imported"
    assert layout.boundary_marker.path == ".ireland.admin_level_imported"
    assert layout.join_export.path == "ireland.place-in-area.csv.gz"
    assert layout.export_path == Path("/data/out/ireland.place-in-area.csv.gz")


def test_artifact_kinds(layout):
    assert layout.root.kind == ArtifactKind.ROOT
    assert layout.definition.kind == ArtifactKind.DEFINITION
    assert layout.definition.path == str(DEFINITION_PATH)
    assert layout.style.kind == ArtifactKind.DEFINITION
    assert layout.place_marker.is_marker
    assert layout.join_export.kind == ArtifactKind.EXPORT


def test_bundled_style_exists():
    assert DEFAULT_STYLE_PATH.is_file()
    assert "admin_level" in DEFAULT_STYLE_PATH.read_text()


def test_stage_declarations(layout):
    stages = {stage.name: stage for stage in build_place_in_area_stages(layout)}

    assert stages["filter-places"].params == {"filters": ["n/place"]}
    assert stages["filter-boundaries"].params == {"filters": ["admin_level"]}
    assert stages["filter-places"].command == StageCommand.TAGS_FILTER

    assert stages["import-places"].inputs[:2] == (layout.place_extract, layout.style)
    assert stages["import-places"].inputs[2:] == layout.import_logic
    assert stages["import-places"].output == layout.place_marker
    assert stages["import-boundaries"].params == {
        "table_prefix": "ireland_admin_level",
        "layer": "admin_level",
    }

    export = stages["spatial-join-export"]
    assert export.inputs[:2] == (layout.place_marker, layout.boundary_marker)
    assert export.inputs[2:] == layout.export_logic
    assert export.output == layout.join_export
    assert export.params == {
        "place_table": "ireland_place_point",
        "boundary_table": "ireland_admin_level_polygon",
    }


def test_layout_round_trips_through_json(layout):
    assert PipelineLayout(**layout.model_dump(mode="json")) == layout


def test_logic_modules_exist():
    names = {path.name for path in IMPORT_LOGIC_PATHS + EXPORT_LOGIC_PATHS}

    assert names == {"import_steps.py", "registry.py", "join.py", "join_row.py", "osm_identity.py"}
    assert all(path.is_file() for path in IMPORT_LOGIC_PATHS + EXPORT_LOGIC_PATHS)


def test_logic_artifacts_are_sources(layout):
    kinds = {artifact.kind for artifact in layout.logic_artifacts}
    names = [artifact.name for artifact in layout.logic_artifacts]

    assert kinds == {ArtifactKind.DEFINITION}
    assert len(names) == len(set(names))
    assert layout.logic_artifacts[:2] == (layout.definition, layout.style)


def test_bundled_style_imports_closed_boundary_ways_as_polygons():
    flags = {}
    for line in DEFAULT_STYLE_PATH.read_text().splitlines():
        if line.strip() and not line.startswith("#"):
            _osm_type, tag, _data_type, flag = line.split()[:4]
            flags[tag] = flag

    assert flags["boundary"] == "polygon"
    assert flags["place"] == "polygon"
