"""
MovR Row Generators - Python Implementation

One generator per MovR table, each a pure function from a row index to the full
tuple of that row. Nothing is materialised: a foreign key is filled in by picking a
row of the referenced table in the same city and regenerating that row through the
``CrossTableResolver``.

Every row draws from its own ``random.Random(seed + row_idx)``, so any row can be
rebuilt in isolation, in any order and on any worker.
"""

import json
import logging
from datetime import timedelta
from random import Random
from typing import Any, Dict, Iterator, List, Optional, Tuple

from movr_datagen.python_libs.common import movr_schema
from movr_datagen.python_libs.common.city_partition import CityPartition
from movr_datagen.python_libs.common.deterministic_ids import deterministic_id
from movr_datagen.python_libs.common.exceptions import RowIndexError, UnknownTableError
from movr_datagen.python_libs.common.movr_config import MovrConfig
from movr_datagen.python_libs.common.movr_schema import CITIES, TableSchema, format_timestamp
from movr_datagen.python_libs.interfaces.row_generator_interface import (
    IFieldValueProvider,
    IReferenceResolver,
    IRowGenerator,
)
from movr_datagen.python_libs.python.field_value_provider import FakerFieldValueProvider

logger = logging.getLogger(__name__)

PROMO_CODE_RULES = '{"type": "percent_discount", "value": "10%"}'


class TableRegistry:
    """Maps table names to their row generators."""

    def __init__(self):
        self._generators: Dict[str, IRowGenerator] = {}

    def register(self, generator: IRowGenerator) -> None:
        self._generators[generator.table_name] = generator

    def get(self, table_name: str) -> IRowGenerator:
        try:
            return self._generators[table_name]
        except KeyError:
            raise UnknownTableError(
                f"Unknown table '{table_name}'. Available tables: {', '.join(self._generators)}"
            ) from None

    def table_names(self) -> List[str]:
        return list(self._generators)

    def __contains__(self, table_name: str) -> bool:
        return table_name in self._generators

    def __iter__(self) -> Iterator[IRowGenerator]:
        return iter(self._generators.values())


class CrossTableResolver(IReferenceResolver):
    """Follows foreign keys by regenerating the referenced row on demand."""

    def __init__(self, registry: TableRegistry, partitions: Dict[str, CityPartition]):
        self.registry = registry
        self.partitions = partitions

    def partition(self, table_name: str) -> CityPartition:
        try:
            return self.partitions[table_name]
        except KeyError:
            raise UnknownTableError(f"Table '{table_name}' is not partitioned by city") from None

    def resolve_row(self, rng: Random, target_table: str, city_idx: int) -> int:
        """Pick the index of a ``target_table`` row in city ``city_idx``."""
        return self.partition(target_table).random_row_in_city(rng, city_idx)

    def resolve_reference(self, rng: Random, target_table: str, city_idx: int) -> str:
        generator = self.registry.get(target_table)
        row_idx = self.resolve_row(rng, target_table, city_idx)
        row = generator.generate_row(row_idx)
        return row[generator.columns.index("id")]


class BaseRowGenerator(IRowGenerator):
    """Shared plumbing: schema, row count, per-row random source and city lookup."""

    schema: TableSchema

    def __init__(
        self,
        config: MovrConfig,
        values: IFieldValueProvider,
        resolver: CrossTableResolver,
    ):
        self.config = config
        self.values = values
        self.resolver = resolver
        self._num_rows = config.row_count(self.schema.name)

    @property
    def table_name(self) -> str:
        return self.schema.name

    @property
    def columns(self) -> Tuple[str, ...]:
        return self.schema.columns

    @property
    def num_rows(self) -> int:
        return self._num_rows

    @property
    def partition(self) -> CityPartition:
        return self.resolver.partition(self.table_name)

    def _check_row(self, row_idx: int) -> None:
        if not 0 <= row_idx < self._num_rows:
            raise RowIndexError(
                f"{self.table_name}: row index {row_idx} out of range [0, {self._num_rows})"
            )

    def _rng(self, row_idx: int) -> Random:
        return Random(self.config.seed + row_idx)

    def rows(self, start: int = 0, stop: Optional[int] = None) -> Iterator[Tuple[Any, ...]]:
        """Yield rows ``[start, stop)`` in order."""
        stop = self._num_rows if stop is None else stop
        for row_idx in range(start, stop):
            yield self.generate_row(row_idx)


class UsersGenerator(BaseRowGenerator):
    schema = movr_schema.USERS_SCHEMA

    def generate_row(self, row_idx: int) -> Tuple[Any, ...]:
        self._check_row(row_idx)
        rng = self._rng(row_idx)
        city = CITIES[self.partition.city_for_row(row_idx)]

        return (
            deterministic_id(row_idx, self._num_rows),  # id
            city.name,  # city
            self.values.name(rng),  # name
            self.values.address(rng),  # address
            self.values.credit_card(rng),  # credit_card
        )


class VehiclesGenerator(BaseRowGenerator):
    schema = movr_schema.VEHICLES_SCHEMA

    def generate_row(self, row_idx: int) -> Tuple[Any, ...]:
        self._check_row(row_idx)
        rng = self._rng(row_idx)
        city_idx = self.partition.city_for_row(row_idx)

        vehicle_type = self.values.vehicle_type(rng)
        owner_id = self.resolver.resolve_reference(rng, movr_schema.USERS, city_idx)

        return (
            deterministic_id(row_idx, self._num_rows),  # id
            CITIES[city_idx].name,  # city
            vehicle_type,  # type
            owner_id,  # owner_id
            format_timestamp(self.config.creation_time),  # creation_time
            self.values.vehicle_status(rng),  # status
            self.values.address(rng),  # current_location
            json.dumps(self.values.vehicle_metadata(rng, vehicle_type)),  # ext
        )


class RidesGenerator(BaseRowGenerator):
    schema = movr_schema.RIDES_SCHEMA

    def generate_row(self, row_idx: int) -> Tuple[Any, ...]:
        self._check_row(row_idx)
        rng = self._rng(row_idx)
        city_idx = self.partition.city_for_row(row_idx)
        city = CITIES[city_idx]

        rider_id = self.resolver.resolve_reference(rng, movr_schema.USERS, city_idx)
        vehicle_id = self.resolver.resolve_reference(rng, movr_schema.VEHICLES, city_idx)
        start_time = self.config.creation_time + timedelta(hours=rng.randrange(30))
        end_time = start_time + timedelta(hours=rng.randrange(30))

        return (
            deterministic_id(row_idx, self._num_rows),  # id
            city.name,  # city
            city.name,  # vehicle_city
            rider_id,  # rider_id
            vehicle_id,  # vehicle_id
            self.values.address(rng),  # start_address
            self.values.address(rng),  # end_address
            format_timestamp(start_time),  # start_time
            format_timestamp(end_time),  # end_time
            rng.randrange(100),  # revenue
        )


class VehicleLocationHistoriesGenerator(BaseRowGenerator):
    schema = movr_schema.VEHICLE_LOCATION_HISTORIES_SCHEMA

    def generate_row(self, row_idx: int) -> Tuple[Any, ...]:
        self._check_row(row_idx)
        rng = self._rng(row_idx)
        city_idx = self.partition.city_for_row(row_idx)

        ride_id = self.resolver.resolve_reference(rng, movr_schema.RIDES, city_idx)
        # Offsetting by the row index keeps (city, ride_id, timestamp) unique even
        # when many histories point at the same ride.
        timestamp = self.config.creation_time + timedelta(milliseconds=row_idx)
        lat = float(-180 + rng.randrange(360))
        long = float(-90 + rng.randrange(180))

        return (
            CITIES[city_idx].name,  # city
            ride_id,  # ride_id
            format_timestamp(timestamp),  # timestamp
            lat,  # lat
            long,  # long
        )


class PromoCodesGenerator(BaseRowGenerator):
    schema = movr_schema.PROMO_CODES_SCHEMA

    def generate_row(self, row_idx: int) -> Tuple[Any, ...]:
        self._check_row(row_idx)
        rng = self._rng(row_idx)

        words = [self.values.word(rng) for _ in range(3)]
        code = f"{'_'.join(words)}_{row_idx}"
        description = self.values.paragraph(rng)
        expiration_time = self.config.creation_time - timedelta(days=rng.randrange(30))
        creation_time = expiration_time - timedelta(days=rng.randrange(30))

        return (
            code,  # code
            description,  # description
            format_timestamp(creation_time),  # creation_time
            format_timestamp(expiration_time),  # expiration_time
            PROMO_CODE_RULES,  # rules
        )


class UserPromoCodesGenerator(BaseRowGenerator):
    """Always empty: num_rows is 0, so every index is out of range."""

    schema = movr_schema.USER_PROMO_CODES_SCHEMA

    def generate_row(self, row_idx: int) -> Tuple[Any, ...]:
        self._check_row(row_idx)
        return ()


GENERATOR_CLASSES = (
    UsersGenerator,
    VehiclesGenerator,
    RidesGenerator,
    VehicleLocationHistoriesGenerator,
    PromoCodesGenerator,
    UserPromoCodesGenerator,
)

PARTITIONED_TABLES = (
    movr_schema.USERS,
    movr_schema.VEHICLES,
    movr_schema.RIDES,
    movr_schema.VEHICLE_LOCATION_HISTORIES,
)


def build_registry(
    config: MovrConfig, values: Optional[IFieldValueProvider] = None
) -> TableRegistry:
    """Validate ``config`` and wire up the generators of every MovR table."""
    config.validate()
    if values is None:
        values = FakerFieldValueProvider(config.locale)

    partitions = {
        table_name: CityPartition(config.row_count(table_name))
        for table_name in PARTITIONED_TABLES
    }
    registry = TableRegistry()
    resolver = CrossTableResolver(registry, partitions)
    for generator_class in GENERATOR_CLASSES:
        registry.register(generator_class(config, values, resolver))

    logger.debug(
        f"Registered {len(registry.table_names())} table generators (seed={config.seed})"
    )
    return registry
