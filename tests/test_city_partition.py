from random import Random

import pytest

from movr_datagen.python_libs.common.city_partition import CityPartition
from movr_datagen.python_libs.common.exceptions import ConfigurationError, RowIndexError


def test_24_rows_two_per_city():
    partition = CityPartition(24)
    assert partition.rows_for_city(0) == (0, 2)
    assert partition.rows_for_city(11) == (22, 24)


def test_50_rows_uneven_buckets():
    partition = CityPartition(50)
    assert partition.rows_for_city(0) == (0, 5)
    assert partition.rows_for_city(1) == (5, 9)


@pytest.mark.parametrize("num_rows", [12, 13, 24, 50, 500, 1000, 1001])
def test_ranges_cover_every_row(num_rows):
    partition = CityPartition(num_rows)
    ranges = [partition.rows_for_city(c) for c in range(12)]

    assert ranges[0][0] == 0
    assert ranges[-1][1] == num_rows
    for (_, prev_high), (low, high) in zip(ranges, ranges[1:]):
        assert low == prev_high
        assert low < high


@pytest.mark.parametrize("num_rows", [12, 13, 24, 50, 500, 1001])
def test_city_for_row_is_monotonic_and_in_range(num_rows):
    partition = CityPartition(num_rows)
    cities = [partition.city_for_row(r) for r in range(num_rows)]

    assert cities[0] == 0
    assert cities[-1] == 11
    assert cities == sorted(cities)
    assert set(cities) == set(range(12))


@pytest.mark.parametrize("num_rows", [24, 36, 48, 50])
def test_rows_map_back_to_their_city(num_rows):
    partition = CityPartition(num_rows)
    for city_idx in range(12):
        low, high = partition.rows_for_city(city_idx)
        for row_idx in range(low, high):
            assert partition.city_for_row(row_idx) == city_idx


def test_random_row_in_city_stays_in_bucket():
    partition = CityPartition(50)
    rng = Random(7)
    for city_idx in range(12):
        low, high = partition.rows_for_city(city_idx)
        for _ in range(20):
            assert low <= partition.random_row_in_city(rng, city_idx) < high


def test_random_row_in_city_uses_callers_rng():
    partition = CityPartition(500)
    first = [partition.random_row_in_city(Random(3), c) for c in range(12)]
    second = [partition.random_row_in_city(Random(3), c) for c in range(12)]
    assert first == second


def test_too_few_rows_rejected():
    with pytest.raises(ConfigurationError, match="12"):
        CityPartition(11)


class TestIndexErrors:
    def test_row_out_of_range(self):
        partition = CityPartition(24)
        with pytest.raises(RowIndexError):
            partition.city_for_row(24)
        with pytest.raises(RowIndexError):
            partition.city_for_row(-1)

    def test_city_out_of_range(self):
        partition = CityPartition(24)
        with pytest.raises(RowIndexError, match="city index 12"):
            partition.rows_for_city(12)

    def test_row_index_error_is_an_index_error(self):
        with pytest.raises(IndexError):
            CityPartition(24).city_for_row(100)
