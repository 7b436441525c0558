from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import lazy_import
import typer
from rich.console import Console
from typing_extensions import Annotated

# Lazy imports - the generators pull in faker and pandas only when a command runs
movr_commands = lazy_import.lazy_module("movr_datagen.cli_utils.movr_commands")

from movr_datagen.cli_utils.console_styles import ConsoleStyles

console = Console()
console_styles = ConsoleStyles()

app = typer.Typer(no_args_is_help=True, pretty_exceptions_show_locals=False)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

SeedOption = Annotated[
    Optional[int], typer.Option("--seed", min=0, help="Key hash seed. [default: 1]")
]
NumUsersOption = Annotated[
    Optional[int],
    typer.Option("--num-users", min=0, help="Initial number of users. [default: 50]"),
]
NumVehiclesOption = Annotated[
    Optional[int],
    typer.Option("--num-vehicles", min=0, help="Initial number of vehicles. [default: 15]"),
]
NumRidesOption = Annotated[
    Optional[int],
    typer.Option("--num-rides", min=0, help="Initial number of rides. [default: 500]"),
]
NumHistoriesOption = Annotated[
    Optional[int],
    typer.Option(
        "--num-histories",
        min=0,
        help="Initial number of ride location histories. [default: 1000]",
    ),
]
NumPromoCodesOption = Annotated[
    Optional[int],
    typer.Option(
        "--num-promo-codes", min=0, help="Initial number of promo codes. [default: 1000]"
    ),
]
LocaleOption = Annotated[
    Optional[str],
    typer.Option("--locale", help="Faker locale for names and addresses. [default: en_US]"),
]


def _overrides(
    seed: Optional[int],
    num_users: Optional[int],
    num_vehicles: Optional[int],
    num_rides: Optional[int],
    num_histories: Optional[int],
    num_promo_codes: Optional[int],
    locale: Optional[str],
) -> Dict[str, Any]:
    return {
        "seed": seed,
        "num_users": num_users,
        "num_vehicles": num_vehicles,
        "num_rides": num_rides,
        "num_histories": num_histories,
        "num_promo_codes": num_promo_codes,
        "locale": locale,
    }


@app.callback()
def main(
    ctx: typer.Context,
    config_file: Annotated[
        Optional[Path],
        typer.Option(
            "--config-file",
            "-c",
            help="YAML file with generation options (falls back to MOVR_DATAGEN_CONFIG, then ./movr.yml)",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option("--log-level", "-l", help="Logging level: DEBUG, INFO, WARNING or ERROR"),
    ] = "WARNING",
):
    """Deterministic synthetic data for the MovR ride sharing schema."""
    level_name = log_level.upper()
    if level_name not in LOG_LEVELS:
        console_styles.print_error(
            console, f"❌ Invalid log level '{log_level}'. Must be one of: {', '.join(LOG_LEVELS)}"
        )
        raise typer.Exit(code=1)

    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=getattr(logging, level_name),
            format="%(asctime)s | %(levelname)-8s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    logging.getLogger("movr_datagen").setLevel(getattr(logging, level_name))

    ctx.obj = {"config_file": config_file, "log_level": level_name}


@app.command()
def meta(
    ctx: typer.Context,
    seed: SeedOption = None,
    num_users: NumUsersOption = None,
    num_vehicles: NumVehiclesOption = None,
    num_rides: NumRidesOption = None,
    num_histories: NumHistoriesOption = None,
    num_promo_codes: NumPromoCodesOption = None,
    locale: LocaleOption = None,
):
    """Show the workload name, description, version and effective configuration."""
    movr_commands.show_meta(
        ctx,
        _overrides(
            seed, num_users, num_vehicles, num_rides, num_histories, num_promo_codes, locale
        ),
    )


@app.command()
def tables(
    ctx: typer.Context,
    seed: SeedOption = None,
    num_users: NumUsersOption = None,
    num_vehicles: NumVehiclesOption = None,
    num_rides: NumRidesOption = None,
    num_histories: NumHistoriesOption = None,
    num_promo_codes: NumPromoCodesOption = None,
    locale: LocaleOption = None,
):
    """List the MovR tables with their row counts."""
    movr_commands.list_tables(
        ctx,
        _overrides(
            seed, num_users, num_vehicles, num_rides, num_histories, num_promo_codes, locale
        ),
    )


@app.command()
def schema(
    table: Annotated[
        Optional[str],
        typer.Argument(help="Table to print (default: all tables in creation order)"),
    ] = None,
):
    """
    Print CREATE TABLE statements.

    Examples:
      # All tables
      movr-datagen schema

      # A single table
      movr-datagen schema rides
    """
    movr_commands.show_schema(table)


@app.command()
def row(
    ctx: typer.Context,
    table: Annotated[str, typer.Argument(help="Table name, e.g. 'rides'")],
    row_idx: Annotated[int, typer.Argument(help="Zero-based row index")],
    seed: SeedOption = None,
    num_users: NumUsersOption = None,
    num_vehicles: NumVehiclesOption = None,
    num_rides: NumRidesOption = None,
    num_histories: NumHistoriesOption = None,
    num_promo_codes: NumPromoCodesOption = None,
    locale: LocaleOption = None,
):
    """
    Regenerate a single row and print it as JSON.

    Examples:
      # Row 42 of rides with the default configuration
      movr-datagen row rides 42

      # Same row for a larger dataset
      movr-datagen row rides 42 --num-rides 100000 --seed 7
    """
    movr_commands.show_row(
        ctx,
        table,
        row_idx,
        _overrides(
            seed, num_users, num_vehicles, num_rides, num_histories, num_promo_codes, locale
        ),
    )


@app.command()
def generate(
    ctx: typer.Context,
    output_dir: Annotated[
        Path,
        typer.Option("--output-dir", "-o", help="Directory the CSV files are written to"),
    ] = Path("movr_data"),
    table: Annotated[
        Optional[List[str]],
        typer.Option("--table", "-t", help="Only generate this table (repeatable)"),
    ] = None,
    workers: Annotated[
        int, typer.Option("--workers", "-w", min=1, help="Number of generation threads")
    ] = 4,
    batch_size: Annotated[
        int, typer.Option("--batch-size", "-b", min=1, help="Rows per generation batch")
    ] = 1000,
    summary_file: Annotated[
        Optional[Path],
        typer.Option("--summary-file", help="Write a JSON generation summary to this file"),
    ] = None,
    seed: SeedOption = None,
    num_users: NumUsersOption = None,
    num_vehicles: NumVehiclesOption = None,
    num_rides: NumRidesOption = None,
    num_histories: NumHistoriesOption = None,
    num_promo_codes: NumPromoCodesOption = None,
    locale: LocaleOption = None,
):
    """
    Generate the MovR dataset as one CSV file per table.

    Examples:
      # Default sizes into ./movr_data
      movr-datagen generate

      # Larger dataset with 8 threads
      movr-datagen generate -o /tmp/movr --num-users 10000 --num-rides 1000000 -w 8

      # Only users and vehicles
      movr-datagen generate -t users -t vehicles
    """
    movr_commands.generate(
        ctx,
        output_dir=output_dir,
        overrides=_overrides(
            seed, num_users, num_vehicles, num_rides, num_histories, num_promo_codes, locale
        ),
        tables=table,
        workers=workers,
        batch_size=batch_size,
        summary_file=summary_file,
    )


if __name__ == "__main__":
    app()
