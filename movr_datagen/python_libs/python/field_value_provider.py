"""
Field Value Provider - Faker Implementation

Domain-flavoured scalar values (names, addresses, credit cards, vehicle attributes,
free text, dictionary words) for the MovR row generators.

Dependencies: faker
"""

import logging
import threading
from random import Random
from typing import Any, Dict, Tuple

from faker import Faker

from movr_datagen.python_libs.interfaces.row_generator_interface import IFieldValueProvider

logger = logging.getLogger(__name__)

VEHICLE_TYPES: Tuple[str, ...] = ("skateboard", "bike", "scooter")
VEHICLE_STATUSES: Tuple[str, ...] = ("available", "in_use", "lost")
VEHICLE_COLORS: Tuple[str, ...] = ("red", "yellow", "blue", "green", "black")
VEHICLE_BRANDS: Dict[str, Tuple[str, ...]] = {
    "skateboard": ("Atlas", "Bove", "Arbor", "Plan B", "Powell"),
    "bike": ("Merida", "Fuji", "Cervelo", "Pinarello", "Santa Cruz", "Kona", "Schwinn"),
    "scooter": ("Razor", "Segway", "Xiaomi", "Bird", "Lime"),
}


class FakerFieldValueProvider(IFieldValueProvider):
    """Field values backed by Faker, reseeded from the caller's random source.

    Every Faker-backed call seeds a thread-local Faker instance with bits drawn from
    ``rng``, so the output depends only on ``rng`` and concurrent workers never
    share Faker's random state.
    """

    def __init__(self, locale: str = "en_US"):
        self.locale = locale
        self._local = threading.local()

    def _faker(self, rng: Random) -> Faker:
        fake = getattr(self._local, "fake", None)
        if fake is None:
            logger.debug(
                f"Creating Faker({self.locale}) for thread {threading.current_thread().name}"
            )
            fake = Faker(self.locale)
            self._local.fake = fake
        fake.seed_instance(rng.getrandbits(64))
        return fake

    def name(self, rng: Random) -> str:
        return self._faker(rng).name()

    def address(self, rng: Random) -> str:
        return self._faker(rng).address().replace("\n", ", ")

    def credit_card(self, rng: Random) -> str:
        return self._faker(rng).credit_card_number()

    def vehicle_type(self, rng: Random) -> str:
        return rng.choice(VEHICLE_TYPES)

    def vehicle_status(self, rng: Random) -> str:
        return rng.choice(VEHICLE_STATUSES)

    def vehicle_metadata(self, rng: Random, vehicle_type: str) -> Dict[str, Any]:
        brands = VEHICLE_BRANDS.get(vehicle_type, VEHICLE_BRANDS["bike"])
        return {
            "color": rng.choice(VEHICLE_COLORS),
            "brand": rng.choice(brands),
        }

    def paragraph(self, rng: Random) -> str:
        return self._faker(rng).paragraph()

    def word(self, rng: Random) -> str:
        return self._faker(rng).word()
