"""
End-to-end test of the place-in-area pipeline.

Runs osmium, osm2pgsql and PostGIS on a tiny hand-written extract: a
boundary relation and a closed boundary way, both around one town, and one
village outside them.
Requires the tools on PATH and POSTGRES_* pointing at a PostGIS database.
"""

import csv
import gzip
import os
import shutil
import uuid

import pytest
from sqlalchemy import text

from libs.models import PostGISSettings
from libs.pipeline import PipelineDriver, PipelineLayout
from services.dagster.place_in_area.ops import ToolchainExecutor
from services.dagster.place_in_area.resources import (
    Osm2pgsqlResource,
    OsmiumResource,
    PostGISResource,
)


pytestmark = pytest.mark.integration

TINY_EXTRACT = """<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6" generator="place-in-area tests">
  <node id="1" version="1" lat="0.0" lon="0.0"/>
  <node id="2" version="1" lat="0.0" lon="1.0"/>
  <node id="3" version="1" lat="1.0" lon="1.0"/>
  <node id="4" version="1" lat="1.0" lon="0.0"/>
  <node id="5" version="1" lat="0.5" lon="0.5">
    <tag k="place" v="town"/>
    <tag k="name" v="Middle"/>
  </node>
  <node id="6" version="1" lat="2.0" lon="2.0">
    <tag k="place" v="village"/>
    <tag k="name" v="Outside"/>
  </node>
  <node id="7" version="1" lat="0.25" lon="0.25"/>
  <node id="8" version="1" lat="0.25" lon="0.75"/>
  <node id="9" version="1" lat="0.75" lon="0.75"/>
  <node id="11" version="1" lat="0.75" lon="0.25"/>
  <way id="10" version="1">
    <nd ref="1"/>
    <nd ref="2"/>
    <nd ref="3"/>
    <nd ref="4"/>
    <nd ref="1"/>
  </way>
  <way id="20" version="1">
    <nd ref="7"/>
    <nd ref="8"/>
    <nd ref="9"/>
    <nd ref="11"/>
    <nd ref="7"/>
    <tag k="boundary" v="administrative"/>
    <tag k="admin_level" v="10"/>
    <tag k="name" v="Inner Ward"/>
  </way>
  <relation id="100" version="1">
    <member type="way" ref="10" role="outer"/>
    <tag k="type" v="boundary"/>
    <tag k="boundary" v="administrative"/>
    <tag k="admin_level" v="8"/>
    <tag k="name" v="Square"/>
    <tag k="name:en" v="Square County"/>
  </relation>
</osm>
"""


@pytest.fixture
def postgis():
    if not os.environ.get("POSTGRES_HOST"):
        pytest.skip("POSTGRES_HOST not set")
    settings = PostGISSettings()
    resource = PostGISResource(
        host=settings.host,
        port=settings.port,
        user=settings.user,
        password=settings.password,
        database=settings.database,
    )
    try:
        if not resource.postgis_version():
            pytest.skip("postgis extension not installed")
    except Exception as e:
        pytest.skip(f"PostGIS not reachable: {e}")
    return resource


@pytest.fixture
def toolchain():
    for binary in ("osmium", "osm2pgsql"):
        if shutil.which(binary) is None:
            pytest.skip(f"{binary} not on PATH")
    return OsmiumResource(), Osm2pgsqlResource()


@pytest.fixture
def layout(tmp_path, postgis):
    extract = tmp_path / "tiny.osm"
    extract.write_text(TINY_EXTRACT, encoding="utf-8")
    layout = PipelineLayout.from_input(
        extract, tmp_path / "out", name=f"pia_test_{uuid.uuid4().hex[:8]}"
    )
    yield layout

    with postgis.get_engine().connect() as conn:
        for table in (layout.place_table, layout.boundary_table):
            conn.execute(text(f'DROP TABLE IF EXISTS "{table}"'))
        conn.commit()


def test_pipeline_end_to_end(layout, postgis, toolchain):
    osmium, osm2pgsql = toolchain
    (layout.output_dir).mkdir()
    driver = PipelineDriver(layout, ToolchainExecutor(osmium, osm2pgsql, postgis))

    summary = driver.run()

    assert len(summary.executed_stages) == 5
    with gzip.open(layout.export_path, "rt", encoding="utf-8", newline="") as f:
        rows = list(csv.reader(f))
    assert sorted(rows[1:]) == [
        ["n", "5", "Middle", "town", "0.5", "0.5", "r", "100", "Square County", "8"],
        ["n", "5", "Middle", "town", "0.5", "0.5", "w", "20", "Inner Ward", "10"],
    ]
    assert postgis.table_exists(layout.place_table)
    assert not postgis.table_exists(f"{layout.place_table_prefix}_polygon")

    again = driver.run()

    assert again.nothing_to_do
