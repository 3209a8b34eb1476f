# =============================================================================
# CLI Command Runner
# =============================================================================
# Shared subprocess wrapper for the command-line tool resources.
# =============================================================================

import logging
import os
import subprocess
from typing import Dict, Optional

from libs.pipeline import CommandResult

__all__ = ["run_cli_command"]

logger = logging.getLogger(__name__)


def run_cli_command(
    cmd: list[str],
    output_path: Optional[str] = None,
    env_overrides: Optional[Dict[str, str]] = None,
) -> CommandResult:
    """
    Execute a command-line tool via subprocess.

    Blocks until the process exits; no timeout is imposed (imports of large
    extracts can run for hours). An interrupt kills the child before
    propagating.

    Args:
        cmd: Command and arguments as list (e.g., ["osmium", "--version"])
        output_path: Optional path to track as output (set only on success)
        env_overrides: Variables added to the inherited environment

    Returns:
        CommandResult with execution details, stdout, stderr, and return code
    """
    env = None
    if env_overrides:
        env = os.environ.copy()
        env.update(env_overrides)

    logger.debug(f"Running: {' '.join(cmd)}")
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            env=env,
        )
    except FileNotFoundError as e:
        # Executable not installed / not on PATH: report like a shell would
        return CommandResult(
            success=False,
            command=cmd,
            stdout="",
            stderr=str(e),
            return_code=127,
        )

    return CommandResult(
        success=result.returncode == 0,
        command=cmd,
        stdout=result.stdout,
        stderr=result.stderr,
        return_code=result.returncode,
        output_path=output_path if result.returncode == 0 else None,
    )
