"""
MovR Workload

Bundles everything a load driver needs to create and populate the MovR schema:
workload metadata, the ordered table list (name, DDL, initial row count and a row
function) and the validate / post-load hooks.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from movr_datagen import __version__
from movr_datagen.python_libs.common.movr_config import MovrConfig
from movr_datagen.python_libs.common.movr_schema import (
    REFERENCE_CHAIN_DEPTH,
    SCHEMAS,
    TABLE_NAMES,
)
from movr_datagen.python_libs.interfaces.row_generator_interface import IFieldValueProvider
from movr_datagen.python_libs.python.post_load import apply_foreign_keys
from movr_datagen.python_libs.python.row_generators import TableRegistry, build_registry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkloadMeta:
    name: str
    description: str
    version: str
    public_facing: bool = True


@dataclass(frozen=True)
class WorkloadTable:
    """One table of the workload: DDL plus a row function over ``[0, initial_rows)``."""

    name: str
    schema: str
    initial_rows: int
    row_fn: Callable[[int], Tuple[Any, ...]]
    reference_chain_depth: int = 1

    def create_statement(self) -> str:
        return f"CREATE TABLE IF NOT EXISTS {self.name} {self.schema}"


MOVR_META = WorkloadMeta(
    name="movr",
    description="MovR is a fictional ride sharing company",
    version=__version__,
)


class MovrWorkload:
    """The MovR workload for a fixed configuration."""

    def __init__(
        self,
        config: Optional[MovrConfig] = None,
        values: Optional[IFieldValueProvider] = None,
    ):
        self.config = config or MovrConfig()
        self._values = values
        self._registry: Optional[TableRegistry] = None

    @property
    def meta(self) -> WorkloadMeta:
        return MOVR_META

    @property
    def registry(self) -> TableRegistry:
        """Row generators, built (and validated) on first use."""
        if self._registry is None:
            self._registry = build_registry(self.config, self._values)
        return self._registry

    def validate(self) -> None:
        """Validate hook: raises ``ConfigurationError`` before any row is generated."""
        self.config.validate()

    def tables(self) -> List[WorkloadTable]:
        """The workload tables in creation order."""
        return [self.table(table_name) for table_name in TABLE_NAMES]

    def table(self, table_name: str) -> WorkloadTable:
        generator = self.registry.get(table_name)
        return WorkloadTable(
            name=table_name,
            schema=SCHEMAS[table_name].body,
            initial_rows=generator.num_rows,
            row_fn=generator.generate_row,
            reference_chain_depth=REFERENCE_CHAIN_DEPTH[table_name],
        )

    def post_load(self, connection: Any) -> List[str]:
        """Post-load hook: add the foreign keys once the data is in place."""
        return apply_foreign_keys(connection)

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.meta.name,
            "description": self.meta.description,
            "version": self.meta.version,
            "public_facing": self.meta.public_facing,
            "config": self.config.to_dict(),
        }
