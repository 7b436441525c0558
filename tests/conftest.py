from random import Random
from typing import Any, Dict

import pytest

from movr_datagen.python_libs.common.movr_config import MovrConfig
from movr_datagen.python_libs.interfaces.row_generator_interface import IFieldValueProvider
from movr_datagen.python_libs.python.row_generators import build_registry


class StubFieldValueProvider(IFieldValueProvider):
    """Cheap values drawn only from the caller's random source."""

    def name(self, rng: Random) -> str:
        return f"user-{rng.randrange(10_000)}"

    def address(self, rng: Random) -> str:
        return f"{rng.randrange(1, 1000)} Main St"

    def credit_card(self, rng: Random) -> str:
        return f"{rng.randrange(10**15, 10**16)}"

    def vehicle_type(self, rng: Random) -> str:
        return rng.choice(("skateboard", "bike", "scooter"))

    def vehicle_status(self, rng: Random) -> str:
        return rng.choice(("available", "in_use", "lost"))

    def vehicle_metadata(self, rng: Random, vehicle_type: str) -> Dict[str, Any]:
        return {"color": rng.choice(("red", "blue")), "brand": vehicle_type.upper()}

    def paragraph(self, rng: Random) -> str:
        return f"paragraph {rng.randrange(100)}"

    def word(self, rng: Random) -> str:
        return rng.choice(("alpha", "beta", "gamma", "delta"))


@pytest.fixture
def small_config() -> MovrConfig:
    return MovrConfig(
        seed=42,
        num_users=24,
        num_vehicles=24,
        num_rides=36,
        num_histories=48,
        num_promo_codes=10,
    )


@pytest.fixture
def stub_values() -> StubFieldValueProvider:
    return StubFieldValueProvider()


@pytest.fixture
def registry(small_config, stub_values):
    return build_registry(small_config, stub_values)
