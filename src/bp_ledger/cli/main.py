"""
Command-line interface for the Blood Pressure Ledger.

Provides commands for recording, editing, deleting, listing, importing and
exporting blood pressure readings.
"""

from pathlib import Path

import typer

from bp_ledger.domain.reading import Reading
from bp_ledger.infrastructure.storage.json_storage import JsonFileStorage
from bp_ledger.services.export import export_document
from bp_ledger.services.import_merge import ImportService
from bp_ledger.services.ledger import LedgerStore
from bp_ledger.services.output import OutputService
from bp_ledger.services.validator import ReadingValidator
from bp_ledger.utils.exceptions import BloodPressureLedgerError, ParseError
from bp_ledger.utils.hashing import ReadingIdGenerator
from bp_ledger.utils.logging_config import get_logger, setup_logging
from bp_ledger.utils.parameters import ParameterLoader
from bp_ledger.utils.timezone_utils import (
    Clock,
    current_local_input,
    format_local_input,
    utc_now,
    utc_to_local,
)

app = typer.Typer(help="Blood Pressure Ledger - personal blood pressure and pulse records")

logger = get_logger(__name__)

CONFIG_OPTION = typer.Option("config/config.yaml", help="Path to configuration file")


class LedgerContext:
    """
    Application root wiring configuration, storage and services.

    The ledger store is loaded once here and shared by all services.
    """

    def __init__(self, param_loader: ParameterLoader, clock: Clock = utc_now) -> None:
        """
        Initialize application context.

        Args:
            param_loader: Loaded configuration.
            clock: Source of the current instant.

        Raises:
            StorageError: If the stored ledger cannot be loaded.
        """
        self.param_loader = param_loader
        self.clock = clock

        processing_config = param_loader.get_processing_config()
        self.timezone = processing_config.timezone

        self.validator = ReadingValidator(processing_config, clock)
        self.id_generator = ReadingIdGenerator(param_loader.get_record_id_config(), clock)
        self.storage = JsonFileStorage(param_loader.get_storage_config())
        self.store = LedgerStore.open(self.storage, self.validator, self.id_generator)
        self.import_service = ImportService(self.store, self.validator)
        self.output_service = OutputService(param_loader.get_output_config(), self.timezone)


def init_context(config_path: str = "config/config.yaml") -> LedgerContext:
    """
    Initialize configuration, logging and the ledger.

    Args:
        config_path: Path to configuration file.

    Returns:
        Application context.
    """
    param_loader = ParameterLoader(config_path)
    setup_logging(param_loader.get_logging_config(), "bp_ledger")
    return LedgerContext(param_loader)


def _fail(action: str, e: BloodPressureLedgerError) -> typer.Exit:
    logger.error(f"{action} failed: {e}")
    typer.echo(f"Error: {e}", err=True)
    return typer.Exit(code=1)


def _warn_if_unsaved(ctx: LedgerContext) -> None:
    if ctx.store.last_persist_error is not None:
        typer.echo(
            f"Warning: changes are kept in memory but could not be saved: "
            f"{ctx.store.last_persist_error}",
            err=True,
        )


def _format_reading(reading: Reading, timezone: str) -> str:
    local = utc_to_local(reading.date, timezone).strftime("%d.%m.%Y %H:%M")
    return (
        f"{reading.id}  {local}  {reading.sys}/{reading.dia} mmHg  "
        f"{reading.puls} BPM  [{reading.status.value}]"
    )


@app.command()
def add(
    sys_: str | None = typer.Option(None, "--sys", help="Systolic pressure (mmHg)"),
    dia: str | None = typer.Option(None, help="Diastolic pressure (mmHg)"),
    puls: str | None = typer.Option(None, help="Pulse (BPM)"),
    date: str | None = typer.Option(
        None, help="Local date and time (YYYY-MM-DDTHH:MM), defaults to now"
    ),
    config_path: str = CONFIG_OPTION,
) -> None:
    """
    Record a new reading.
    """
    try:
        ctx = init_context(config_path)

        fields = {
            "sys": sys_,
            "dia": dia,
            "puls": puls,
            "date_local": date or current_local_input(ctx.timezone, ctx.clock),
        }
        reading = ctx.store.create(fields)

        typer.echo(f"Saved reading {_format_reading(reading, ctx.timezone)}")
        _warn_if_unsaved(ctx)

    except BloodPressureLedgerError as e:
        raise _fail("Add", e) from e


@app.command()
def edit(
    reading_id: str = typer.Argument(..., help="ID of the reading to edit"),
    sys_: str | None = typer.Option(None, "--sys", help="Systolic pressure (mmHg)"),
    dia: str | None = typer.Option(None, help="Diastolic pressure (mmHg)"),
    puls: str | None = typer.Option(None, help="Pulse (BPM)"),
    date: str | None = typer.Option(None, help="Local date and time (YYYY-MM-DDTHH:MM)"),
    config_path: str = CONFIG_OPTION,
) -> None:
    """
    Edit a reading.

    Options left out keep the reading's current value; the reading is then
    saved with all of its fields.
    """
    try:
        ctx = init_context(config_path)
        existing = ctx.store.get(reading_id)

        fields = {
            "sys": sys_ if sys_ is not None else existing.sys,
            "dia": dia if dia is not None else existing.dia,
            "puls": puls if puls is not None else existing.puls,
            "date_local": date or format_local_input(existing.date, ctx.timezone),
        }
        reading = ctx.store.update(reading_id, fields)

        typer.echo(f"Updated reading {_format_reading(reading, ctx.timezone)}")
        _warn_if_unsaved(ctx)

    except BloodPressureLedgerError as e:
        raise _fail("Edit", e) from e


@app.command()
def delete(
    reading_id: str = typer.Argument(..., help="ID of the reading to delete"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Delete without asking"),
    config_path: str = CONFIG_OPTION,
) -> None:
    """
    Delete a reading after confirmation.
    """
    try:
        ctx = init_context(config_path)

        if reading_id not in ctx.store:
            typer.echo(f"No reading with id {reading_id}, nothing to delete")

        elif yes or typer.confirm("Delete reading? This action cannot be undone."):
            ctx.store.delete(reading_id)
            typer.echo(f"Deleted reading {reading_id}")
            _warn_if_unsaved(ctx)

        else:
            typer.echo("Cancelled")

    except BloodPressureLedgerError as e:
        raise _fail("Delete", e) from e


@app.command("list")
def list_readings(
    config_path: str = CONFIG_OPTION,
) -> None:
    """
    List all readings, newest first.
    """
    try:
        ctx = init_context(config_path)
        readings = ctx.store.list()

        if not readings:
            typer.echo("No readings recorded")
            return

        for reading in readings:
            typer.echo(_format_reading(reading, ctx.timezone))

    except BloodPressureLedgerError as e:
        raise _fail("List", e) from e


@app.command("import")
def import_file(
    file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="JSON document to import"
    ),
    config_path: str = CONFIG_OPTION,
) -> None:
    """
    Import readings from a JSON document.

    Readings without sys, dia or puls are skipped. Nothing is de-duplicated:
    importing the same file twice adds its readings twice.
    """
    try:
        ctx = init_context(config_path)

        try:
            raw_text = file.read_bytes().decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"{file.name} is not UTF-8 text: {e}") from e

        result = ctx.import_service.import_document(raw_text)

        typer.echo(f"{result.imported} readings imported.")
        _warn_if_unsaved(ctx)

    except BloodPressureLedgerError as e:
        raise _fail("Import", e) from e


@app.command()
def export(
    save: bool = typer.Option(False, help="Write a dated file to the output directory"),
    config_path: str = CONFIG_OPTION,
) -> None:
    """
    Export all readings as a JSON document.

    Prints the document for copying, or writes it to a dated file with --save.
    """
    try:
        ctx = init_context(config_path)
        readings = ctx.store.list()

        if save:
            today = utc_to_local(ctx.clock(), ctx.timezone).date()
            path = ctx.output_service.write_export(readings, today)
            typer.echo(f"Exported {len(readings)} readings to {path}")
        else:
            indent = ctx.param_loader.get_output_config().indent
            typer.echo(export_document(readings, indent=indent))

    except BloodPressureLedgerError as e:
        raise _fail("Export", e) from e


@app.command()
def protocol(
    csv: bool = typer.Option(False, help="Also write the protocol as CSV"),
    config_path: str = CONFIG_OPTION,
) -> None:
    """
    Print the reading protocol as a table.
    """
    try:
        ctx = init_context(config_path)
        readings = ctx.store.list()

        df = ctx.output_service.build_protocol_frame(readings)
        typer.echo("Blutdruck Protokoll")
        typer.echo(df.to_string(index=False) if not df.empty else "No readings recorded")

        if csv:
            path = ctx.output_service.write_protocol_csv(readings)
            typer.echo(f"\nProtocol written to {path}")

    except BloodPressureLedgerError as e:
        raise _fail("Protocol", e) from e


if __name__ == "__main__":
    app()
