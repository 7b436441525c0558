"""
Abstract interfaces for MovR row generation.

This module defines the contracts between the row generators, the field value
provider they delegate flavoured scalar values to, and the resolver they use to
follow foreign keys into other tables.
"""

from abc import ABC, abstractmethod
from random import Random
from typing import Any, Dict, Tuple


class IFieldValueProvider(ABC):
    """Supplies domain-flavoured scalar values drawn from a caller-supplied random source.

    Implementations must draw every random choice from ``rng`` and keep no random
    state of their own, so a row built twice with equally seeded sources is identical.
    """

    @abstractmethod
    def name(self, rng: Random) -> str:
        """Generate a person name."""
        pass

    @abstractmethod
    def address(self, rng: Random) -> str:
        """Generate a single-line street address."""
        pass

    @abstractmethod
    def credit_card(self, rng: Random) -> str:
        """Generate a credit card number."""
        pass

    @abstractmethod
    def vehicle_type(self, rng: Random) -> str:
        """Pick a vehicle type."""
        pass

    @abstractmethod
    def vehicle_status(self, rng: Random) -> str:
        """Pick a vehicle status."""
        pass

    @abstractmethod
    def vehicle_metadata(self, rng: Random, vehicle_type: str) -> Dict[str, Any]:
        """Generate the free-form metadata record stored in ``vehicles.ext``."""
        pass

    @abstractmethod
    def paragraph(self, rng: Random) -> str:
        """Generate a free-text paragraph."""
        pass

    @abstractmethod
    def word(self, rng: Random) -> str:
        """Pick a dictionary word."""
        pass


class IRowGenerator(ABC):
    """Pure function from a row index to the complete tuple of one table's row."""

    @property
    @abstractmethod
    def table_name(self) -> str:
        pass

    @property
    @abstractmethod
    def columns(self) -> Tuple[str, ...]:
        pass

    @property
    @abstractmethod
    def num_rows(self) -> int:
        pass

    @abstractmethod
    def generate_row(self, row_idx: int) -> Tuple[Any, ...]:
        """Build row ``row_idx``; identical inputs always give an identical tuple."""
        pass


class IReferenceResolver(ABC):
    """Resolves a foreign key to the identifier of a same-city row in another table."""

    @abstractmethod
    def resolve_reference(self, rng: Random, target_table: str, city_idx: int) -> str:
        """Pick a row of ``target_table`` in city ``city_idx`` and return its identifier."""
        pass
