"""Dagster ops for the place-in-area pipeline."""

from .executor import ToolchainExecutor
from .stage_ops import STAGE_OPS, PlaceInAreaConfig, build_stage_op, resolve_layout
from .report_op import generate_report

__all__ = [
    "ToolchainExecutor",
    "STAGE_OPS",
    "PlaceInAreaConfig",
    "build_stage_op",
    "resolve_layout",
    "generate_report",
]
