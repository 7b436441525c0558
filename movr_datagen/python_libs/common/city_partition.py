"""
City partitioning of a table's row-index space.

Each table splits ``[0, num_rows)`` into one contiguous bucket per city, in city
order. The forward mapping (row -> city) and the inverse (city -> row range) use
the same float64 arithmetic so a row picked from a city's range always maps back
to that city. When ``num_rows`` is not a multiple of the city count the ceiling
rounding can leave a single boundary row reachable from two neighbouring ranges;
that behaviour is part of the reproducibility contract and is kept as is.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Tuple

from movr_datagen.python_libs.common.exceptions import ConfigurationError, RowIndexError
from movr_datagen.python_libs.common.movr_schema import NUM_CITIES


@dataclass(frozen=True)
class CityPartition:
    """Deterministic mapping between row indexes and city buckets."""

    num_rows: int
    num_cities: int = NUM_CITIES

    def __post_init__(self):
        if self.num_rows < self.num_cities:
            raise ConfigurationError(
                f"a minimum of {self.num_cities} rows are required, got {self.num_rows}"
            )

    @property
    def rows_per_city(self) -> float:
        return float(self.num_rows) / float(self.num_cities)

    def city_for_row(self, row_idx: int) -> int:
        """Return the index of the city bucket ``row_idx`` falls in."""
        if not 0 <= row_idx < self.num_rows:
            raise RowIndexError(
                f"row index {row_idx} out of range [0, {self.num_rows})"
            )
        return int(float(row_idx) / self.rows_per_city)

    def rows_for_city(self, city_idx: int) -> Tuple[int, int]:
        """Return the half-open ``(min, max)`` row range of a city bucket."""
        if not 0 <= city_idx < self.num_cities:
            raise RowIndexError(
                f"city index {city_idx} out of range [0, {self.num_cities})"
            )
        per_city = self.rows_per_city
        low = min(int(math.ceil(float(city_idx) * per_city)), self.num_rows)
        high = min(int(math.ceil(float(city_idx + 1) * per_city)), self.num_rows)
        return low, high

    def random_row_in_city(self, rng: random.Random, city_idx: int) -> int:
        """Pick a row uniformly from a city's bucket using the caller's random source."""
        low, high = self.rows_for_city(city_idx)
        return low + rng.randrange(high - low)
