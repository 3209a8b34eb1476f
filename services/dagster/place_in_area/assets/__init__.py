"""Assets for the place-in-area pipeline."""

from .health_checks import osm_toolchain_health_check

__all__ = ["osm_toolchain_health_check"]
