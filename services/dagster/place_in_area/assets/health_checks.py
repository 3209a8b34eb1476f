"""Health check assets for validating the OSM toolchain and database."""

from typing import Any, Dict

from dagster import asset, AssetExecutionContext
from sqlalchemy.exc import SQLAlchemyError


def _check_toolchain(osmium, osm2pgsql, postgis, log) -> Dict[str, Any]:
    """
    Verify the external tools and the database the pipeline needs.

    Checks:
    - osmium version
    - osm2pgsql version
    - PostGIS reachable and the postgis extension installed

    Returns:
        Dictionary with check results and versions.

    Raises:
        RuntimeError: If any check fails.
    """
    results: Dict[str, Any] = {}

    # 1. osmium
    res = osmium.version()
    if not res.success:
        raise RuntimeError(f"osmium check failed: {res.stderr.strip()}")
    osmium_version = res.stdout.strip().splitlines()[0] if res.stdout.strip() else ""
    log.info(f"osmium version: {osmium_version}")
    results["osmium_version"] = osmium_version

    # 2. osm2pgsql (prints its banner on stderr)
    res = osm2pgsql.version()
    if not res.success:
        raise RuntimeError(f"osm2pgsql check failed: {res.stderr.strip()}")
    banner = (res.stdout or res.stderr).strip()
    osm2pgsql_version = banner.splitlines()[0] if banner else ""
    log.info(f"osm2pgsql version: {osm2pgsql_version}")
    results["osm2pgsql_version"] = osm2pgsql_version

    # 3. PostGIS
    try:
        postgis_version = postgis.postgis_version()
    except SQLAlchemyError as e:
        raise RuntimeError(f"PostGIS connection failed: {e}") from e
    if not postgis_version:
        raise RuntimeError(
            f"postgis extension is not installed in database {postgis.database}"
        )
    log.info(f"PostGIS extension version: {postgis_version}")
    results["postgis_version"] = postgis_version

    log.info("Toolchain Health Check Passed")
    return results


@asset(
    group_name="maintenance",
    compute_kind="osm",
    required_resource_keys={"osmium", "osm2pgsql", "postgis"},
)
def osm_toolchain_health_check(context: AssetExecutionContext) -> dict:
    """
    Verify that osmium, osm2pgsql and PostGIS are installed and reachable.

    Returns:
        Dictionary with check results and versions.

    Raises:
        RuntimeError: If any check fails.
    """
    return _check_toolchain(
        context.resources.osmium,
        context.resources.osm2pgsql,
        context.resources.postgis,
        context.log,
    )
