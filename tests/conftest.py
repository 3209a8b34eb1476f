"""
Shared pytest fixtures for pipeline tests.

Provides an in-memory artifact store seeded with the pipeline's source
artifacts and a deterministic fake executor, so stage/graph/driver behaviour
can be tested without osmium, osm2pgsql or PostGIS.
"""

from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pytest

from libs.models import StageDefinition
from libs.pipeline import (
    CommandExecutor,
    CommandResult,
    MemoryArtifactStore,
    PartialStreamError,
    PipelineLayout,
)


# =============================================================================
# Fake Executor
# =============================================================================

class FakeExecutor(CommandExecutor):
    """
    Records every stage it runs and writes deterministic staged content.

    Attributes:
        store: Store whose staging area receives the output
        calls: Stage names, in the order they were executed
        fail: stage name -> return code to fail with
        break_stream: stage names that write partial output then raise
            PartialStreamError
        content: stage name -> bytes to stage (default: b"<stage name>")
    """

    def __init__(self, store: MemoryArtifactStore):
        self.store = store
        self.calls: List[str] = []
        self.fail: Dict[str, int] = {}
        self.break_stream: set = set()
        self.content: Dict[str, bytes] = {}

    def execute(
        self,
        stage: StageDefinition,
        inputs: Sequence[Path],
        output: Path,
        log,
    ) -> CommandResult:
        self.calls.append(stage.name)
        command = ["fake", stage.name]

        if stage.name in self.fail:
            return CommandResult(
                success=False,
                command=command,
                stdout="",
                stderr=f"{stage.name} broke",
                return_code=self.fail[stage.name],
            )

        if stage.name in self.break_stream:
            self.store.write_staging(output, b"partial")
            raise PartialStreamError(stage.name, 3)

        if not stage.output.is_marker:
            self.store.write_staging(
                output, self.content.get(stage.name, stage.name.encode("utf-8"))
            )
        return CommandResult(
            success=True,
            command=command,
            stdout="",
            stderr="",
            return_code=0,
            rows_written=2 if stage.name == "spatial-join-export" else None,
        )


# =============================================================================
# Layout / Store Fixtures
# =============================================================================

@pytest.fixture
def layout() -> PipelineLayout:
    """Layout for /data/ireland.osm.pbf with outputs under /data/out."""
    return PipelineLayout.from_input("/data/ireland.osm.pbf", "/data/out")


@pytest.fixture
def memory_store(layout) -> MemoryArtifactStore:
    """Memory store holding the pipeline logic artifacts and the root extract."""
    store = MemoryArtifactStore(root=layout.output_dir)
    for artifact in layout.logic_artifacts:
        store.add(artifact, artifact.name.encode("utf-8"))
    store.add(layout.root, b"osm")
    return store


@pytest.fixture
def fake_executor(memory_store) -> FakeExecutor:
    return FakeExecutor(memory_store)


class FakeReport:
    """Stand-in for ReportResource."""

    def __init__(self, return_code: int = 0):
        self.return_code = return_code
        self.calls: List[tuple] = []

    @property
    def enabled(self) -> bool:
        return True

    def generate(self, export_path: str, report_path: str) -> CommandResult:
        self.calls.append((export_path, report_path))
        command = ["report", export_path, report_path]
        return CommandResult(
            success=self.return_code == 0,
            command=command,
            stdout="",
            stderr="" if self.return_code == 0 else "report broke",
            return_code=self.return_code,
        )


@pytest.fixture
def fake_report() -> FakeReport:
    return FakeReport()


def join_record(
    place_osm_id: int = 1001,
    boundary_osm_id: int = -12345,
    place_name: Optional[str] = "Baile Átha Cliath",
    place_name_en: Optional[str] = "Dublin",
    boundary_name: Optional[str] = "Éire",
    boundary_name_en: Optional[str] = "Ireland",
    boundary_admin_level="2",
    place_type: str = "city",
    place_lat: float = 53.3498,
    place_lon: float = -6.2603,
) -> dict:
    """One row as returned by the containment join query."""
    return {
        "place_osm_id": place_osm_id,
        "place_name": place_name,
        "place_name_en": place_name_en,
        "place_type": place_type,
        "place_lat": place_lat,
        "place_lon": place_lon,
        "boundary_osm_id": boundary_osm_id,
        "boundary_name": boundary_name,
        "boundary_name_en": boundary_name_en,
        "boundary_admin_level": boundary_admin_level,
    }


@pytest.fixture
def make_join_record():
    """Factory for join query rows (see join_record)."""
    return join_record
