"""Dagster Jobs - Executable Workflows."""

from .place_in_area_job import place_in_area_job

__all__ = ["place_in_area_job"]
