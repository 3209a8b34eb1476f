# =============================================================================
# Place-in-Area Pipeline Definition
# =============================================================================
# The five stages of the pipeline and where their artifacts live. This file
# is itself an input of every stage: editing it invalidates all outputs. The
# modules holding the import recipe and the join are inputs of the stages
# that run them.
# =============================================================================

from pathlib import Path
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, Field, model_validator

from libs.models import Artifact, ArtifactKind, StageCommand, StageDefinition
from libs.models import join_row
from libs.spatial_utils import osm_identity, pipeline_name_from_path, table_prefix_for
from libs.transformations import import_steps, join as join_query, registry

__all__ = [
    "DEFAULT_STYLE_PATH",
    "DEFINITION_PATH",
    "EXPORT_LOGIC_PATHS",
    "IMPORT_LOGIC_PATHS",
    "PipelineLayout",
    "build_place_in_area_stages",
]

DEFINITION_PATH = Path(__file__).resolve()
DEFAULT_STYLE_PATH = DEFINITION_PATH.with_name("place_in_area.style")

# Modules whose code decides what the import and export stages write
IMPORT_LOGIC_PATHS = tuple(
    Path(module.__file__).resolve() for module in (import_steps, registry)
)
EXPORT_LOGIC_PATHS = tuple(
    Path(module.__file__).resolve() for module in (join_query, join_row, osm_identity)
)

# osmium tags-filter expressions
PLACE_FILTER = "n/place"
BOUNDARY_FILTER = "admin_level"


def _logic_artifact(path: Path) -> Artifact:
    return Artifact(name=f"stage logic {path.name}", path=str(path), kind=ArtifactKind.DEFINITION)


class PipelineLayout(BaseModel):
    """
    Names and locations of every artifact of one pipeline.

    The pipeline name comes from the input filename; extracts, markers and
    the export are named after it inside the output directory, so several
    regions can share one output directory and one database.

    Attributes:
        name: Logical pipeline name
        input_path: Root OSM extract (absolute)
        output_dir: Directory for extracts, markers and the export (absolute)
        style_path: osm2pgsql style file (absolute)
    """

    name: str = Field(..., description="Logical pipeline name")
    input_path: Path = Field(..., description="Root OSM extract")
    output_dir: Path = Field(..., description="Directory holding derived artifacts")
    style_path: Path = Field(DEFAULT_STYLE_PATH, description="osm2pgsql style file")

    @model_validator(mode="after")
    def validate_name(self) -> "PipelineLayout":
        """
        Fail early on names that cannot become table prefixes.

        Raises:
            ValueError: If the name has no usable characters
        """
        table_prefix_for(self.name, "place")
        table_prefix_for(self.name, "admin_level")
        return self

    @classmethod
    def from_input(
        cls,
        input_path: Union[str, Path],
        output_dir: Union[str, Path] = ".",
        name: Optional[str] = None,
        style_path: Optional[Union[str, Path]] = None,
    ) -> "PipelineLayout":
        """
        Build a layout for an input extract.

        Args:
            input_path: Root OSM extract
            output_dir: Output directory (default: current directory)
            name: Pipeline name override (default: derived from input filename)
            style_path: osm2pgsql style override

        Raises:
            ValueError: If no usable name can be derived
        """
        input_path = Path(input_path).expanduser().resolve()
        return cls(
            name=name or pipeline_name_from_path(input_path),
            input_path=input_path,
            output_dir=Path(output_dir).expanduser().resolve(),
            style_path=Path(style_path).expanduser().resolve() if style_path else DEFAULT_STYLE_PATH,
        )

    # -------------------------------------------------------------------------
    # Table prefixes
    # -------------------------------------------------------------------------

    @property
    def place_table_prefix(self) -> str:
        return table_prefix_for(self.name, "place")

    @property
    def boundary_table_prefix(self) -> str:
        return table_prefix_for(self.name, "admin_level")

    @property
    def place_table(self) -> str:
        return f"{self.place_table_prefix}_point"

    @property
    def boundary_table(self) -> str:
        return f"{self.boundary_table_prefix}_polygon"

    # -------------------------------------------------------------------------
    # Artifacts
    # -------------------------------------------------------------------------

    @property
    def root(self) -> Artifact:
        return Artifact(name="root extract", path=str(self.input_path), kind=ArtifactKind.ROOT)

    @property
    def definition(self) -> Artifact:
        return Artifact(name="pipeline definition", path=str(DEFINITION_PATH), kind=ArtifactKind.DEFINITION)

    @property
    def style(self) -> Artifact:
        return Artifact(name="importer style", path=str(self.style_path), kind=ArtifactKind.DEFINITION)

    @property
    def import_logic(self) -> Tuple[Artifact, ...]:
        return tuple(_logic_artifact(path) for path in IMPORT_LOGIC_PATHS)

    @property
    def export_logic(self) -> Tuple[Artifact, ...]:
        return tuple(_logic_artifact(path) for path in EXPORT_LOGIC_PATHS)

    @property
    def logic_artifacts(self) -> Tuple[Artifact, ...]:
        """Every source artifact holding pipeline logic (definition, style, modules)."""
        return (self.definition, self.style, *self.import_logic, *self.export_logic)

    @property
    def place_extract(self) -> Artifact:
        return Artifact(name="place extract", path=f"{self.name}.place.osm.pbf", kind=ArtifactKind.EXTRACT)

    @property
    def boundary_extract(self) -> Artifact:
        return Artifact(name="boundary extract", path=f"{self.name}.admin_level.osm.pbf", kind=ArtifactKind.EXTRACT)

    @property
    def place_marker(self) -> Artifact:
        return Artifact(name="place import marker", path=f".{self.name}.place_imported", kind=ArtifactKind.MARKER)

    @property
    def boundary_marker(self) -> Artifact:
        return Artifact(name="boundary import marker", path=f".{self.name}.admin_level_imported", kind=ArtifactKind.MARKER)

    @property
    def join_export(self) -> Artifact:
        return Artifact(name="join export", path=f"{self.name}.place-in-area.csv.gz", kind=ArtifactKind.EXPORT)

    @property
    def export_path(self) -> Path:
        return self.output_dir / self.join_export.path


def build_place_in_area_stages(layout: PipelineLayout) -> List[StageDefinition]:
    """
    Declare the pipeline's stages, in execution order.

    1. filter-places: root extract -> place node extract
    2. filter-boundaries: root extract -> admin boundary extract
    3. import-places: place extract -> place import marker
    4. import-boundaries: boundary extract -> boundary import marker
    5. spatial-join-export: both markers -> compressed join export
    """
    return [
        StageDefinition(
            name="filter-places",
            inputs=(layout.root,),
            output=layout.place_extract,
            command=StageCommand.TAGS_FILTER,
            params={"filters": [PLACE_FILTER]},
            description="Extracting place nodes",
        ),
        StageDefinition(
            name="filter-boundaries",
            inputs=(layout.root,),
            output=layout.boundary_extract,
            command=StageCommand.TAGS_FILTER,
            params={"filters": [BOUNDARY_FILTER]},
            description="Extracting admin_levels",
        ),
        StageDefinition(
            name="import-places",
            inputs=(layout.place_extract, layout.style, *layout.import_logic),
            output=layout.place_marker,
            command=StageCommand.IMPORT,
            params={"table_prefix": layout.place_table_prefix, "layer": "place"},
            description="Importing place nodes",
        ),
        StageDefinition(
            name="import-boundaries",
            inputs=(layout.boundary_extract, layout.style, *layout.import_logic),
            output=layout.boundary_marker,
            command=StageCommand.IMPORT,
            params={"table_prefix": layout.boundary_table_prefix, "layer": "admin_level"},
            description="Importing admin_levels",
        ),
        StageDefinition(
            name="spatial-join-export",
            inputs=(layout.place_marker, layout.boundary_marker, *layout.export_logic),
            output=layout.join_export,
            command=StageCommand.JOIN_EXPORT,
            params={
                "place_table": layout.place_table,
                "boundary_table": layout.boundary_table,
            },
            description="Calculating place/boundary combos",
        ),
    ]
