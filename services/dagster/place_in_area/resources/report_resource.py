# =============================================================================
# Report Resource - Downstream distance report generator
# =============================================================================

import shlex

from dagster import ConfigurableResource
from pydantic import Field

from libs.pipeline import CommandResult

from .cli_command import run_cli_command

__all__ = ["ReportResource"]


class ReportResource(ConfigurableResource):
    """
    Wraps the external program that turns the join export into the
    distance report.

    The program is invoked as ``<command> <export_path> <report_path>``.

    Configuration:
        command: Program and leading arguments, shell-quoted
            (e.g. "cargo run --release --"). Empty disables the report.
    """

    command: str = Field("", description="Report generator command line")

    @property
    def enabled(self) -> bool:
        return bool(self.command.strip())

    def generate(self, export_path: str, report_path: str) -> CommandResult:
        """
        Run the report generator over a join export.

        Raises:
            ValueError: If no command is configured
        """
        if not self.enabled:
            raise ValueError("No report generator command configured")

        cmd = shlex.split(self.command) + [export_path, report_path]
        return run_cli_command(cmd, output_path=report_path)
