# =============================================================================
# Osmium Resource - CLI wrapper for OSM tag filtering
# =============================================================================
# Provides a thin, stateless wrapper around `osmium tags-filter`.
# =============================================================================

from typing import Sequence

from dagster import ConfigurableResource
from pydantic import Field

from libs.pipeline import CommandResult

from .cli_command import run_cli_command

__all__ = ["OsmiumResource"]


class OsmiumResource(ConfigurableResource):
    """
    Dagster resource for osmium CLI operations.

    Configuration:
        binary: osmium executable name or path

    Example:
        >>> osmium = OsmiumResource()
        >>> result = osmium.tags_filter(
        ...     input_path="/data/ireland.osm.pbf",
        ...     output_path="/data/out/ireland.place.osm.pbf",
        ...     filters=["n/place"],
        ... )
        >>> result.success
        True
    """

    binary: str = Field("osmium", description="osmium executable")

    def tags_filter(
        self,
        input_path: str,
        output_path: str,
        filters: Sequence[str],
        overwrite: bool = True,
        omit_referenced: bool = False,
    ) -> CommandResult:
        """
        Keep only objects matching tag filter expressions.

        Args:
            input_path: Source OSM file
            output_path: Destination OSM file (format from its suffix)
            filters: osmium filter expressions (e.g. ["n/place"], ["admin_level"])
            overwrite: Replace an existing output file
            omit_referenced: Do not add objects referenced by matches
                (e.g. the nodes of a matching way)

        Returns:
            CommandResult with command execution details and success status

        Raises:
            ValueError: If no filter expression is given
        """
        if not filters:
            raise ValueError("tags_filter needs at least one filter expression")

        cmd = [self.binary, "tags-filter"]
        if overwrite:
            cmd.append("--overwrite")
        if omit_referenced:
            cmd.append("--omit-referenced")
        cmd.extend([input_path, "-o", output_path])
        cmd.extend(filters)

        return run_cli_command(cmd, output_path=output_path)

    def version(self) -> CommandResult:
        """Report the installed osmium version."""
        return run_cli_command([self.binary, "--version"])
