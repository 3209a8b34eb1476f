# =============================================================================
# Report Op - Downstream distance report
# =============================================================================
# Hands the join export to the external report generator. Runs after every
# stage, including when all stages were up to date.
# =============================================================================

from typing import Any, Dict

from dagster import In, OpExecutionContext, Out, op

from libs.pipeline import REPORT_STAGE, PipelineLayout, StageExecutionError


def _generate_report(report, run_state: Dict[str, Any], log) -> Dict[str, Any]:
    """
    Core logic for generate_report.

    This function is extracted for easier unit testing without Dagster context.

    Args:
        report: ReportResource instance
        run_state: Run state from the last stage op
        log: Logger instance (context.log)

    Returns:
        Run state with ``report`` set to the report location, or None when
        no generator is configured

    Raises:
        StageExecutionError: If the generator exits non-zero
    """
    if not report.enabled:
        log.info("No report generator configured, stopping at the export")
        return {**run_state, "report": None}

    layout = PipelineLayout(**run_state["layout"])
    report_path = layout.output_dir / run_state.get("report_path", "distances.md")
    log.info(f"Generating report: {layout.export_path} -> {report_path}")

    result = report.generate(str(layout.export_path), str(report_path))
    if not result.success:
        log.error(
            f"Report generator failed with status {result.return_code}: "
            f"{' '.join(result.command)}"
        )
        raise StageExecutionError(
            REPORT_STAGE, result.return_code, result.command, result.stderr
        )

    return {**run_state, "report": str(report_path)}


@op(
    ins={"run_state": In(dagster_type=dict)},
    out={"run_state": Out(dagster_type=dict)},
    required_resource_keys={"report"},
)
def generate_report(context: OpExecutionContext, run_state: dict) -> dict:
    """
    Run the downstream report generator over the join export.

    Raises:
        StageExecutionError: If the generator exits non-zero
    """
    return _generate_report(
        report=context.resources.report,
        run_state=run_state,
        log=context.log,
    )
