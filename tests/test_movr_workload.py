from unittest.mock import MagicMock

import pytest

from movr_datagen import __version__
from movr_datagen.packages.movr import MovrWorkload
from movr_datagen.python_libs.common.exceptions import ConfigurationError, UnknownTableError
from movr_datagen.python_libs.common.movr_config import MovrConfig
from movr_datagen.python_libs.common.movr_schema import FOREIGN_KEY_STATEMENTS, TABLE_NAMES


@pytest.fixture
def workload(small_config, stub_values):
    return MovrWorkload(small_config, stub_values)


def test_meta():
    meta = MovrWorkload().meta
    assert meta.name == "movr"
    assert meta.description == "MovR is a fictional ride sharing company"
    assert meta.version == __version__


def test_tables_in_creation_order(workload):
    tables = workload.tables()
    assert [t.name for t in tables] == list(TABLE_NAMES)
    assert [t.initial_rows for t in tables] == [24, 24, 36, 48, 10, 0]


def test_table_row_fn_matches_registry(workload):
    rides = workload.table("rides")
    assert rides.row_fn(5) == workload.registry.get("rides").generate_row(5)
    assert rides.reference_chain_depth == 3
    assert rides.create_statement().startswith("CREATE TABLE IF NOT EXISTS rides (")


def test_unknown_table(workload):
    with pytest.raises(UnknownTableError):
        workload.table("drivers")


def test_validate_hook():
    MovrWorkload(MovrConfig()).validate()
    with pytest.raises(ConfigurationError, match="at least 12 rides"):
        MovrWorkload(MovrConfig(num_rides=4)).validate()


def test_post_load_applies_foreign_keys(workload):
    connection = MagicMock()
    assert workload.post_load(connection) == list(FOREIGN_KEY_STATEMENTS)
    connection.commit.assert_called_once()


def test_describe(workload):
    description = workload.describe()
    assert description["name"] == "movr"
    assert description["config"]["num_users"] == 24
    assert description["config"]["creation_time"] == "2019-01-02T03:04:05+00:00"
