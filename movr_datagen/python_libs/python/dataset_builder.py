"""
MovR Dataset Builder - Python Implementation

Drives the row generators over whole tables: splits each table's row range into
batches, generates the batches on a thread pool and hands them, in row order, to a
sink (pandas DataFrame or CSV file). At most ``2 * max_workers`` batches are in
flight, so a slow sink throttles generation instead of buffering the table.

Dependencies: pandas
"""

import logging
import time
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any, Deque, Iterable, Iterator, List, Optional, Tuple

import pandas as pd

from movr_datagen.python_libs.common.movr_logger import (
    DatasetGenerationSummary,
    MovrGenerationLogger,
    TableGenerationMetrics,
    TimestampColumnInfo,
    utc_now_iso,
)
from movr_datagen.python_libs.common.movr_schema import REFERENCE_CHAIN_DEPTH, TABLE_NAMES
from movr_datagen.python_libs.interfaces.row_generator_interface import IRowGenerator
from movr_datagen.python_libs.python.row_generators import TableRegistry

logger = logging.getLogger(__name__)

Row = Tuple[Any, ...]

TIMESTAMP_COLUMNS = ("creation_time", "expiration_time", "start_time", "end_time", "timestamp")


class DatasetBuilder:
    """Generates MovR tables in parallel batches."""

    def __init__(
        self,
        registry: TableRegistry,
        max_workers: int = 4,
        batch_size: int = 1000,
        generation_logger: Optional[MovrGenerationLogger] = None,
    ):
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        self.registry = registry
        self.max_workers = max_workers
        self.batch_size = batch_size
        self.generation_logger = generation_logger or MovrGenerationLogger()

    @staticmethod
    def _generate_batch(generator: IRowGenerator, start: int, stop: int) -> List[Row]:
        return [generator.generate_row(row_idx) for row_idx in range(start, stop)]

    def iter_batches(
        self, table_name: str, start: int = 0, stop: Optional[int] = None
    ) -> Iterator[List[Row]]:
        """Yield the rows ``[start, stop)`` of a table as ordered batches."""
        generator = self.registry.get(table_name)
        stop = generator.num_rows if stop is None else min(stop, generator.num_rows)
        if start >= stop:
            return

        if self.max_workers == 1:
            for batch_start in range(start, stop, self.batch_size):
                yield self._generate_batch(
                    generator, batch_start, min(batch_start + self.batch_size, stop)
                )
            return

        max_in_flight = self.max_workers * 2
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            pending: Deque[Future] = deque()
            for batch_start in range(start, stop, self.batch_size):
                batch_stop = min(batch_start + self.batch_size, stop)
                pending.append(
                    executor.submit(self._generate_batch, generator, batch_start, batch_stop)
                )
                if len(pending) >= max_in_flight:
                    yield pending.popleft().result()
            while pending:
                yield pending.popleft().result()

    def iter_rows(self, table_name: str) -> Iterator[Row]:
        for batch in self.iter_batches(table_name):
            yield from batch

    def build_dataframe(self, table_name: str) -> pd.DataFrame:
        """Generate a whole table into a DataFrame."""
        generator = self.registry.get(table_name)
        rows = list(self.iter_rows(table_name))
        return pd.DataFrame.from_records(rows, columns=list(generator.columns))

    def write_csv(self, table_name: str, output_dir: Path) -> TableGenerationMetrics:
        """Stream a table into ``<output_dir>/<table_name>.csv``."""
        generator = self.registry.get(table_name)
        columns = list(generator.columns)
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        file_path = output_dir / f"{table_name}.csv"
        depth = REFERENCE_CHAIN_DEPTH.get(table_name, 1)

        self.generation_logger.log_table_generation_start(table_name, generator.num_rows, depth)
        start_time = time.time()

        # Header first so empty tables still produce a loadable file.
        pd.DataFrame(columns=columns).to_csv(file_path, index=False)
        rows_written = 0
        batches = 0
        timestamp_columns: List[TimestampColumnInfo] = []
        for batch in self.iter_batches(table_name):
            frame = pd.DataFrame.from_records(batch, columns=columns)
            frame.to_csv(file_path, mode="a", header=False, index=False)
            timestamp_columns = _merge_timestamp_info(
                timestamp_columns,
                self.generation_logger.analyze_timestamp_columns(
                    frame, [c for c in columns if c in TIMESTAMP_COLUMNS]
                ),
            )
            rows_written += len(batch)
            batches += 1

        metrics = TableGenerationMetrics(
            table_name=table_name,
            generation_timestamp=utc_now_iso(),
            rows_generated=rows_written,
            generation_duration_seconds=time.time() - start_time,
            file_path=str(file_path),
            reference_chain_depth=depth,
            batches=batches,
            workers=self.max_workers,
            timestamp_columns=timestamp_columns,
        )
        self.generation_logger.log_table_generation_complete(metrics)
        return metrics

    def write_dataset(
        self,
        output_dir: Path,
        tables: Optional[Iterable[str]] = None,
        seed: int = 0,
        config_applied: Optional[dict] = None,
    ) -> DatasetGenerationSummary:
        """Write every requested table (all MovR tables by default) as CSV."""
        table_names = list(tables) if tables else list(TABLE_NAMES)
        for table_name in table_names:
            # Fail on unknown names before any file is written.
            self.registry.get(table_name)

        start_time = time.time()
        table_metrics = [
            self.write_csv(table_name, output_dir) for table_name in table_names
        ]

        # Only this run's tables; the logger keeps metrics across runs.
        summary = self.generation_logger.build_summary(
            seed=seed,
            duration_seconds=time.time() - start_time,
            config_applied=config_applied,
            table_metrics=table_metrics,
        )
        self.generation_logger.log_dataset_generation_summary(summary)
        return summary


def _merge_timestamp_info(
    current: List[TimestampColumnInfo], batch: List[TimestampColumnInfo]
) -> List[TimestampColumnInfo]:
    if not current:
        return batch
    merged = []
    for existing, new in zip(current, batch):
        # Timestamps share one format and offset, so string order is time order.
        values_min = [v for v in (existing.min_value, new.min_value) if v is not None]
        values_max = [v for v in (existing.max_value, new.max_value) if v is not None]
        merged.append(
            TimestampColumnInfo(
                column_name=existing.column_name,
                min_value=min(values_min) if values_min else None,
                max_value=max(values_max) if values_max else None,
                null_count=existing.null_count + new.null_count,
                total_count=existing.total_count + new.total_count,
            )
        )
    return merged
