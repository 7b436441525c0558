"""
MovR Generation Logging

This module provides logging for MovR dataset generation: per-table metrics
(rows, duration, rate, output file, timestamp column ranges) and a summary of the
whole run that can be exported as JSON.
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class TimestampColumnInfo:
    """Value range of a timestamp column in generated data."""

    column_name: str
    min_value: Optional[str] = None
    max_value: Optional[str] = None
    null_count: int = 0
    total_count: int = 0

    @property
    def completeness_percentage(self) -> float:
        if self.total_count == 0:
            return 0.0
        return ((self.total_count - self.null_count) / self.total_count) * 100


@dataclass
class TableGenerationMetrics:
    """Metrics for the generation of one table."""

    table_name: str
    generation_timestamp: str
    rows_generated: int
    generation_duration_seconds: float
    file_path: Optional[str] = None
    reference_chain_depth: int = 1
    batches: int = 0
    workers: int = 1
    timestamp_columns: List[TimestampColumnInfo] = field(default_factory=list)

    @property
    def generation_rate_rows_per_second(self) -> float:
        """Calculate generation rate in rows per second."""
        if self.generation_duration_seconds <= 0:
            return 0.0
        return self.rows_generated / self.generation_duration_seconds


@dataclass
class DatasetGenerationSummary:
    """Summary of a full MovR dataset generation run."""

    seed: int
    generation_timestamp: str
    total_duration_seconds: float
    table_metrics: List[TableGenerationMetrics]
    config_applied: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_tables(self) -> int:
        return len(self.table_metrics)

    @property
    def total_rows(self) -> int:
        return sum(metrics.rows_generated for metrics in self.table_metrics)

    @property
    def overall_generation_rate(self) -> float:
        """Calculate overall generation rate in rows per second."""
        if self.total_duration_seconds <= 0:
            return 0.0
        return self.total_rows / self.total_duration_seconds

    def get_table_by_name(self, table_name: str) -> Optional[TableGenerationMetrics]:
        return next(
            (metrics for metrics in self.table_metrics if metrics.table_name == table_name),
            None,
        )

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result["total_tables"] = self.total_tables
        result["total_rows"] = self.total_rows
        result["overall_generation_rate"] = self.overall_generation_rate
        return result


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class MovrGenerationLogger:
    """Logger for MovR generation runs with per-table metric tracking."""

    def __init__(
        self,
        logger_name: str = "movr_datagen",
        log_level: int = logging.INFO,
        enable_console_output: bool = False,
        log_file_path: Optional[str] = None,
    ):
        self.logger = logging.getLogger(logger_name)
        self.logger.setLevel(log_level)

        if enable_console_output:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(log_level)
            console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            self.logger.addHandler(console_handler)

        if log_file_path:
            file_handler = logging.FileHandler(log_file_path)
            file_handler.setLevel(log_level)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            self.logger.addHandler(file_handler)

        self._table_metrics: List[TableGenerationMetrics] = []

    @property
    def table_metrics(self) -> List[TableGenerationMetrics]:
        return list(self._table_metrics)

    def analyze_timestamp_columns(
        self, dataframe: pd.DataFrame, columns: List[str]
    ) -> List[TimestampColumnInfo]:
        """Collect min/max/null information for the given timestamp columns."""
        infos = []
        for column_name in columns:
            if column_name not in dataframe.columns:
                continue
            series = dataframe[column_name]
            non_null = series.dropna()
            infos.append(
                TimestampColumnInfo(
                    column_name=column_name,
                    min_value=str(non_null.min()) if not non_null.empty else None,
                    max_value=str(non_null.max()) if not non_null.empty else None,
                    null_count=int(series.isna().sum()),
                    total_count=int(len(series)),
                )
            )
        return infos

    def log_table_generation_start(self, table_name: str, target_rows: int, depth: int):
        self.logger.info(f"🚀 Starting generation for {table_name}")
        self.logger.info(f"   🎯 Target rows: {target_rows:,}")
        self.logger.debug(f"   🔗 Reference chain depth: {depth}")

    def log_table_generation_complete(self, table_metrics: TableGenerationMetrics) -> None:
        """Log the completion of a table and keep its metrics for the summary."""
        self.logger.info(f"✅ Completed generation for {table_metrics.table_name}")
        self.logger.info(f"   📈 Rows generated: {table_metrics.rows_generated:,}")
        self.logger.info(
            f"   ⏱️ Duration: {table_metrics.generation_duration_seconds:.2f} seconds"
        )
        self.logger.info(
            f"   🚀 Rate: {table_metrics.generation_rate_rows_per_second:.0f} rows/second"
        )
        if table_metrics.file_path:
            self.logger.info(f"   📁 File: {table_metrics.file_path}")

        for column in table_metrics.timestamp_columns:
            if column.min_value and column.max_value:
                self.logger.info(
                    f"     • {column.column_name}: {column.min_value} to {column.max_value}"
                    f" ({column.completeness_percentage:.1f}% complete)"
                )

        self._table_metrics.append(table_metrics)

    def build_summary(
        self,
        seed: int,
        duration_seconds: float,
        config_applied: Optional[Dict[str, Any]] = None,
        table_metrics: Optional[List[TableGenerationMetrics]] = None,
    ) -> DatasetGenerationSummary:
        """Summarise ``table_metrics`` (default: every table logged so far)."""
        return DatasetGenerationSummary(
            seed=seed,
            generation_timestamp=utc_now_iso(),
            total_duration_seconds=duration_seconds,
            table_metrics=list(table_metrics) if table_metrics is not None else self.table_metrics,
            config_applied=config_applied or {},
        )

    def log_dataset_generation_summary(self, summary: DatasetGenerationSummary) -> None:
        self.logger.info(f"🎉 MovR dataset generation complete (seed={summary.seed})")
        self.logger.info(f"   📊 Total tables: {summary.total_tables}")
        self.logger.info(f"   📈 Total rows: {summary.total_rows:,}")
        self.logger.info(f"   ⏱️ Total duration: {summary.total_duration_seconds:.2f} seconds")
        self.logger.info(f"   🚀 Overall rate: {summary.overall_generation_rate:.0f} rows/second")
        self.logger.info("   📋 Table breakdown:")
        for table_metrics in summary.table_metrics:
            self.logger.info(
                f"     • {table_metrics.table_name}: {table_metrics.rows_generated:,} rows"
            )

    def export_summary(self, summary: DatasetGenerationSummary, output_path: Path) -> Path:
        """Write the summary as JSON."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("w", encoding="utf-8") as f:
            json.dump(summary.to_dict(), f, indent=2, default=str)
        self.logger.info(f"Exported generation summary to {output_path}")
        return output_path
