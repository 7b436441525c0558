import json
from datetime import datetime

import pytest

from movr_datagen.python_libs.common.city_partition import CityPartition
from movr_datagen.python_libs.common.exceptions import (
    ConfigurationError,
    RowIndexError,
    UnknownTableError,
)
from movr_datagen.python_libs.common.movr_config import MovrConfig
from movr_datagen.python_libs.common.movr_schema import CITIES, SCHEMAS, TABLE_NAMES
from movr_datagen.python_libs.python.field_value_provider import (
    VEHICLE_STATUSES,
    VEHICLE_TYPES,
    FakerFieldValueProvider,
)
from movr_datagen.python_libs.python.row_generators import (
    PROMO_CODE_RULES,
    build_registry,
)


def _as_dict(generator, row):
    return dict(zip(generator.columns, row))


def _ids_in_city(generator, city_idx):
    low, high = CityPartition(generator.num_rows).rows_for_city(city_idx)
    return {generator.generate_row(i)[0] for i in range(low, high)}


def _parse(timestamp):
    return datetime.fromisoformat(timestamp)


class TestRegistry:
    def test_all_tables_registered_in_order(self, registry):
        assert registry.table_names() == list(TABLE_NAMES)

    def test_unknown_table(self, registry):
        with pytest.raises(UnknownTableError, match="Unknown table 'drivers'"):
            registry.get("drivers")

    def test_unknown_table_is_key_error(self, registry):
        with pytest.raises(KeyError):
            registry.get("drivers")

    def test_columns_follow_schema(self, registry):
        for generator in registry:
            assert generator.columns == SCHEMAS[generator.table_name].columns
            if generator.num_rows:
                assert len(generator.generate_row(0)) == len(generator.columns)

    def test_invalid_config_rejected_before_generation(self, stub_values):
        with pytest.raises(ConfigurationError, match="at least 12 users"):
            build_registry(MovrConfig(num_users=5), stub_values)


class TestDeterminism:
    @pytest.mark.parametrize("table_name", TABLE_NAMES[:5])
    def test_same_seed_same_rows(self, small_config, stub_values, table_name):
        first = build_registry(small_config, stub_values).get(table_name)
        second = build_registry(small_config, stub_values).get(table_name)
        assert list(first.rows()) == list(second.rows())

    def test_row_order_does_not_matter(self, registry):
        rides = registry.get("rides")
        forward = [rides.generate_row(i) for i in range(rides.num_rows)]
        backward = [rides.generate_row(i) for i in reversed(range(rides.num_rows))]
        assert forward == list(reversed(backward))

    def test_different_seed_changes_values(self, small_config, stub_values):
        other = small_config.with_overrides({"seed": 43})
        users_a = build_registry(small_config, stub_values).get("users")
        users_b = build_registry(other, stub_values).get("users")
        assert users_a.generate_row(0)[2:] != users_b.generate_row(0)[2:]
        # ids depend on the row index only
        assert users_a.generate_row(0)[0] == users_b.generate_row(0)[0]

    def test_out_of_range_row(self, registry):
        users = registry.get("users")
        with pytest.raises(RowIndexError):
            users.generate_row(users.num_rows)
        with pytest.raises(RowIndexError):
            users.generate_row(-1)


class TestUsers:
    def test_city_follows_partition(self, registry):
        users = registry.get("users")
        partition = CityPartition(users.num_rows)
        for row_idx, row in enumerate(users.rows()):
            assert row[1] == CITIES[partition.city_for_row(row_idx)].name

    def test_ids_unique(self, registry):
        users = registry.get("users")
        ids = [row[0] for row in users.rows()]
        assert len(set(ids)) == users.num_rows


class TestVehicles:
    def test_owner_is_user_in_same_city(self, registry):
        users = registry.get("users")
        vehicles = registry.get("vehicles")
        for row in vehicles.rows():
            vehicle = _as_dict(vehicles, row)
            city_idx = [c.name for c in CITIES].index(vehicle["city"])
            assert vehicle["owner_id"] in _ids_in_city(users, city_idx)

    def test_values(self, registry, small_config):
        vehicles = registry.get("vehicles")
        vehicle = _as_dict(vehicles, vehicles.generate_row(3))
        assert vehicle["type"] in ("skateboard", "bike", "scooter")
        assert vehicle["status"] in ("available", "in_use", "lost")
        assert vehicle["creation_time"] == "2019-01-02 03:04:05.000000+00:00"
        assert json.loads(vehicle["ext"])["brand"] == vehicle["type"].upper()


class TestRides:
    def test_rider_and_vehicle_resolve_in_same_city(self, registry):
        users = registry.get("users")
        vehicles = registry.get("vehicles")
        rides = registry.get("rides")
        for row in rides.rows():
            ride = _as_dict(rides, row)
            city_idx = [c.name for c in CITIES].index(ride["city"])
            assert ride["vehicle_city"] == ride["city"]
            assert ride["rider_id"] in _ids_in_city(users, city_idx)
            assert ride["vehicle_id"] in _ids_in_city(vehicles, city_idx)

    def test_boston_ride(self, registry):
        users = registry.get("users")
        vehicles = registry.get("vehicles")
        rides = registry.get("rides")
        # 36 rides: three per city, boston is city 1
        low, high = CityPartition(rides.num_rows).rows_for_city(1)
        assert (low, high) == (3, 6)
        for row_idx in range(low, high):
            ride = _as_dict(rides, rides.generate_row(row_idx))
            assert ride["city"] == "boston"
            assert ride["vehicle_city"] == "boston"
            assert ride["rider_id"] in _ids_in_city(users, 1)
            assert ride["vehicle_id"] in _ids_in_city(vehicles, 1)

    def test_times_and_revenue(self, registry):
        rides = registry.get("rides")
        for row in rides.rows():
            ride = _as_dict(rides, row)
            start = _parse(ride["start_time"])
            end = _parse(ride["end_time"])
            assert start >= _parse("2019-01-02 03:04:05+00:00")
            assert end >= start
            assert isinstance(ride["revenue"], int)
            assert 0 <= ride["revenue"] < 100


class TestVehicleLocationHistories:
    def test_ride_in_same_city(self, registry):
        rides = registry.get("rides")
        histories = registry.get("vehicle_location_histories")
        for row in histories.rows():
            history = _as_dict(histories, row)
            city_idx = [c.name for c in CITIES].index(history["city"])
            assert history["ride_id"] in _ids_in_city(rides, city_idx)

    def test_timestamps_increase_by_a_millisecond(self, registry):
        histories = registry.get("vehicle_location_histories")
        stamps = [_parse(row[2]) for row in histories.rows()]
        assert stamps == sorted(stamps)
        assert len(set(stamps)) == len(stamps)
        assert (stamps[1] - stamps[0]).total_seconds() == pytest.approx(0.001)

    def test_coordinates(self, registry):
        histories = registry.get("vehicle_location_histories")
        for row in histories.rows():
            history = _as_dict(histories, row)
            assert -180.0 <= history["lat"] < 180.0
            assert -90.0 <= history["long"] < 90.0


class TestPromoCodes:
    def test_code_suffix_unique(self, registry):
        promo_codes = registry.get("promo_codes")
        codes = [row[0] for row in promo_codes.rows()]
        assert len(set(codes)) == promo_codes.num_rows
        for row_idx, code in enumerate(codes):
            assert code.endswith(f"_{row_idx}")
            assert len(code.split("_")) == 4

    def test_times_and_rules(self, registry):
        promo_codes = registry.get("promo_codes")
        for row in promo_codes.rows():
            promo = _as_dict(promo_codes, row)
            creation = _parse(promo["creation_time"])
            expiration = _parse(promo["expiration_time"])
            assert creation <= expiration <= _parse("2019-01-02 03:04:05+00:00")
            assert promo["rules"] == PROMO_CODE_RULES

    def test_not_partitioned(self, registry):
        with pytest.raises(UnknownTableError):
            registry.get("promo_codes").partition


class TestUserPromoCodes:
    def test_always_empty(self, registry):
        user_promo_codes = registry.get("user_promo_codes")
        assert user_promo_codes.num_rows == 0
        assert list(user_promo_codes.rows()) == []
        with pytest.raises(RowIndexError):
            user_promo_codes.generate_row(0)


class TestFakerFieldValueProvider:
    def test_rows_are_reproducible(self, small_config):
        first = build_registry(small_config).get("rides")
        second = build_registry(small_config).get("rides")
        assert first.generate_row(7) == second.generate_row(7)

    def test_user_values(self, small_config):
        users = build_registry(small_config).get("users")
        user = _as_dict(users, users.generate_row(0))
        assert user["name"]
        assert "\n" not in user["address"]
        assert user["credit_card"].isdigit()

    def test_vehicle_values(self, small_config):
        vehicles = build_registry(small_config).get("vehicles")
        vehicle = _as_dict(vehicles, vehicles.generate_row(0))
        assert vehicle["type"] in VEHICLE_TYPES
        assert vehicle["status"] in VEHICLE_STATUSES
        assert set(json.loads(vehicle["ext"])) == {"color", "brand"}
