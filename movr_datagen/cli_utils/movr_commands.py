"""
MovR CLI Commands

This module contains the command implementations for the MovR generator,
following the established pattern of separating CLI logic from the main cli.py file.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich.console import Console

from movr_datagen.cli_utils.console_styles import ConsoleStyles
from movr_datagen.python_libs.common.exceptions import MovrDataGenError
from movr_datagen.python_libs.common.movr_config import MovrConfig, load_config
from movr_datagen.python_libs.common.movr_schema import SCHEMAS, TABLE_NAMES

console = Console()
console_styles = ConsoleStyles()
logger = logging.getLogger(__name__)


def _load_config(ctx: typer.Context, overrides: Dict[str, Any]) -> MovrConfig:
    obj = ctx.obj or {}
    try:
        return load_config(obj.get("config_file"), overrides)
    except MovrDataGenError as e:
        console_styles.print_error(console, f"❌ Invalid configuration: {e}")
        raise typer.Exit(code=1)


def show_meta(ctx: typer.Context, overrides: Dict[str, Any]):
    """Print the workload metadata and the effective configuration."""
    from movr_datagen.packages.movr import MovrWorkload

    workload = MovrWorkload(_load_config(ctx, overrides))
    console.print_json(json.dumps(workload.describe()))


def list_tables(ctx: typer.Context, overrides: Dict[str, Any]):
    """Show every table with its row count, reference chain depth and primary key."""
    from movr_datagen.packages.movr import MovrWorkload

    workload = MovrWorkload(_load_config(ctx, overrides))
    rows = [
        (
            table.name,
            f"{table.initial_rows:,}",
            table.reference_chain_depth,
            ", ".join(SCHEMAS[table.name].primary_key),
        )
        for table in workload.tables()
    ]
    console.print(
        console_styles.build_table(
            f"MovR tables (seed={workload.config.seed})",
            ["Table", "Rows", "Depth", "Primary key"],
            rows,
        )
    )


def show_schema(table: Optional[str] = None):
    """Print CREATE TABLE statements for one or all tables."""
    if table is not None and table not in SCHEMAS:
        console_styles.print_error(
            console,
            f"❌ Unknown table '{table}'. Must be one of: {', '.join(TABLE_NAMES)}",
        )
        raise typer.Exit(code=1)

    names = [table] if table else list(TABLE_NAMES)
    for name in names:
        # Plain print: DDL is meant to be piped into a SQL shell.
        print(f"{SCHEMAS[name].create_statement()};")


def show_row(ctx: typer.Context, table: str, row_idx: int, overrides: Dict[str, Any]):
    """Regenerate a single row and print it as JSON."""
    from movr_datagen.packages.movr import MovrWorkload

    workload = MovrWorkload(_load_config(ctx, overrides))
    try:
        generator = workload.registry.get(table)
        row = generator.generate_row(row_idx)
    except MovrDataGenError as e:
        console_styles.print_error(console, f"❌ {e}")
        raise typer.Exit(code=1)

    console.print_json(json.dumps(dict(zip(generator.columns, row))))


def generate(
    ctx: typer.Context,
    output_dir: Path,
    overrides: Dict[str, Any],
    tables: Optional[List[str]] = None,
    workers: int = 4,
    batch_size: int = 1000,
    summary_file: Optional[Path] = None,
):
    """Generate the MovR dataset as one CSV file per table."""
    from movr_datagen.python_libs.common.movr_logger import MovrGenerationLogger
    from movr_datagen.python_libs.python.dataset_builder import DatasetBuilder
    from movr_datagen.python_libs.python.row_generators import build_registry

    config = _load_config(ctx, overrides)

    if tables:
        unknown = [t for t in tables if t not in TABLE_NAMES]
        if unknown:
            console_styles.print_error(
                console,
                f"❌ Unknown table(s): {', '.join(unknown)}. Must be one of: {', '.join(TABLE_NAMES)}",
            )
            raise typer.Exit(code=1)

    console_styles.print_info(
        console,
        f"Generating MovR data (seed={config.seed}) into {output_dir} with {workers} worker(s)",
    )

    try:
        log_level = (ctx.obj or {}).get("log_level", "WARNING")
        builder = DatasetBuilder(
            build_registry(config),
            max_workers=workers,
            batch_size=batch_size,
            generation_logger=MovrGenerationLogger(log_level=getattr(logging, log_level)),
        )
        summary = builder.write_dataset(
            output_dir,
            tables=tables,
            seed=config.seed,
            config_applied=config.to_dict(),
        )
    except (MovrDataGenError, ValueError) as e:
        console_styles.print_error(console, f"❌ Generation failed: {e}")
        raise typer.Exit(code=1)

    rows = [
        (m.table_name, f"{m.rows_generated:,}", f"{m.generation_duration_seconds:.2f}s", m.file_path)
        for m in summary.table_metrics
    ]
    console.print(
        console_styles.build_table("Generated tables", ["Table", "Rows", "Duration", "File"], rows)
    )

    if summary_file:
        builder.generation_logger.export_summary(summary, summary_file)
        console_styles.print_info(console, f"Summary written to {summary_file}")

    console_styles.print_success(
        console, f"✅ Generated {summary.total_rows:,} rows across {summary.total_tables} tables"
    )
