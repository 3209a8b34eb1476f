# =============================================================================
# Unit Tests: Pipeline driver
# =============================================================================

from unittest.mock import Mock

import pytest

from libs.models import StageOutcome
from libs.pipeline import (
    REPORT_STAGE,
    PartialStreamError,
    PipelineDriver,
    StageExecutionError,
)

ALL_STAGES = [
    "filter-places",
    "filter-boundaries",
    "import-places",
    "import-boundaries",
    "spatial-join-export",
]


@pytest.fixture
def driver(layout, memory_store, fake_executor, fake_report):
    return PipelineDriver(
        layout,
        fake_executor,
        store=memory_store,
        report=fake_report,
        report_path="distances.md",
        log=Mock(),
    )


# =============================================================================
# Test: first run / idempotence
# =============================================================================

def test_first_run_executes_every_stage(driver, fake_executor, layout):
    summary = driver.run()

    assert fake_executor.calls == ALL_STAGES
    assert summary.executed_stages == ALL_STAGES
    assert summary.pipeline_name == "ireland"
    assert summary.export_path == str(layout.export_path)
    assert summary.completed_at is not None


def test_second_run_has_nothing_to_do(driver, fake_executor, memory_store, layout):
    driver.run()
    export_before = memory_store.read(layout.join_export)
    stamp_before = memory_store.timestamp(layout.join_export)

    summary = driver.run()

    assert summary.nothing_to_do
    assert summary.skipped_stages == ALL_STAGES
    assert fake_executor.calls == ALL_STAGES
    assert memory_store.read(layout.join_export) == export_before
    assert memory_store.timestamp(layout.join_export) == stamp_before


def test_report_runs_even_when_nothing_to_do(driver, fake_report, layout):
    driver.run()
    summary = driver.run()

    assert len(fake_report.calls) == 2
    assert fake_report.calls[-1] == (
        str(layout.export_path),
        str(layout.output_dir / "distances.md"),
    )
    assert summary.report_path == str(layout.output_dir / "distances.md")


def test_force_reruns_everything(driver, fake_executor):
    driver.run()
    driver.run(force=True)

    assert fake_executor.calls == ALL_STAGES + ALL_STAGES


# =============================================================================
# Test: monotonic invalidation
# =============================================================================

def test_new_root_extract_reruns_everything(driver, fake_executor, memory_store, layout):
    driver.run()
    memory_store.add(layout.root, b"newer extract")

    summary = driver.run()

    assert summary.executed_stages == ALL_STAGES


def test_new_boundary_extract_reruns_only_downstream(driver, fake_executor, memory_store, layout):
    driver.run()
    memory_store.add(layout.boundary_extract, b"edited by hand")
    fake_executor.calls.clear()

    summary = driver.run()

    assert fake_executor.calls == ["import-boundaries", "spatial-join-export"]
    assert summary.skipped_stages == ["filter-places", "filter-boundaries", "import-places"]


def test_edited_definition_reruns_everything(driver, memory_store, layout):
    driver.run()
    memory_store.add(layout.definition, b"edited pipeline")

    assert driver.run().executed_stages == ALL_STAGES


def test_edited_join_logic_reruns_export(driver, memory_store, layout):
    driver.run()
    join_module = next(a for a in layout.export_logic if a.name.endswith("join.py"))
    memory_store.add(join_module, b"edited query")

    summary = driver.run()

    assert summary.executed_stages == ["spatial-join-export"]


def test_edited_import_recipe_reruns_imports_and_export(driver, memory_store, layout):
    driver.run()
    memory_store.add(layout.import_logic[0], b"edited recipe")

    summary = driver.run()

    assert summary.executed_stages == ["import-places", "import-boundaries", "spatial-join-export"]


def test_plan_matches_run(driver, memory_store, layout):
    driver.run()
    memory_store.add(layout.place_extract, b"edited")

    planned = [stage.name for stage, runs in driver.plan() if runs]
    executed = driver.run().executed_stages

    assert planned == executed == ["import-places", "spatial-join-export"]


# =============================================================================
# Test: failures
# =============================================================================

def test_boundary_import_failure_stops_pipeline(driver, fake_executor, fake_report, memory_store, layout):
    fake_executor.fail["import-boundaries"] = 3

    with pytest.raises(StageExecutionError) as exc_info:
        driver.run()

    assert exc_info.value.stage == "import-boundaries"
    assert exc_info.value.exit_status == 3
    assert "spatial-join-export" not in fake_executor.calls
    assert not memory_store.exists(layout.boundary_marker)
    assert not memory_store.exists(layout.join_export)
    assert fake_report.calls == []


def test_broken_export_keeps_previous_export(driver, fake_executor, memory_store, layout):
    driver.run()
    previous = memory_store.read(layout.join_export)
    memory_store.add(layout.place_marker)
    fake_executor.break_stream.add("spatial-join-export")

    with pytest.raises(PartialStreamError):
        driver.run()

    assert memory_store.read(layout.join_export) == previous
    assert memory_store.staged_paths == []


def test_failure_is_logged(layout, memory_store, fake_executor):
    log = Mock()
    fake_executor.fail["filter-places"] = 2
    driver = PipelineDriver(layout, fake_executor, store=memory_store, log=log)

    with pytest.raises(StageExecutionError):
        driver.run()

    logged = " ".join(str(call) for call in log.error.call_args_list)
    assert "filter-places" in logged


def test_report_failure(driver, fake_report):
    fake_report.return_code = 4

    with pytest.raises(StageExecutionError) as exc_info:
        driver.run()

    assert exc_info.value.stage == REPORT_STAGE
    assert exc_info.value.exit_status == 4


def test_without_report_stops_at_export(layout, memory_store, fake_executor):
    driver = PipelineDriver(layout, fake_executor, store=memory_store, log=Mock())

    summary = driver.run()

    assert summary.report_path is None
    assert summary.stages[-1].stage == "spatial-join-export"
    assert summary.stages[-1].outcome == StageOutcome.EXECUTED
    assert summary.stages[-1].rows_written == 2
