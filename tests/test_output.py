"""Unit tests for the output service."""

import json
from datetime import date

import pandas as pd

from bp_ledger.domain.reading import Reading
from bp_ledger.services.output import OutputService
from bp_ledger.utils.parameters import OutputConfig


def _readings() -> list[Reading]:
    return [
        Reading(id="b", sys=145, dia=95, puls=88, date="2024-03-15T18:45:00.000Z"),
        Reading(id="a", sys=120, dia=80, puls=60, date="2024-01-01T07:00:00.000Z"),
    ]


def test_export_file_name() -> None:
    """Test the dated export file name."""
    service = OutputService(OutputConfig(export_file_template="blutdruck_daten_{date}.json"), "Europe/Berlin")

    result = service.export_file_name(date(2024, 5, 17))
    if result != "blutdruck_daten_2024-05-17.json":
        raise AssertionError(f"Unexpected export file name: {result}")


def test_write_export(tmp_path) -> None:
    """Test that the export file holds the export document."""
    service = OutputService(OutputConfig(dir=str(tmp_path / "out")), "Europe/Berlin")

    path = service.write_export(_readings(), date(2024, 5, 17))

    if path.name != "blutdruck_daten_2024-05-17.json":
        raise AssertionError(f"Unexpected export path: {path}")

    parsed = json.loads(path.read_text(encoding="utf-8"))
    if [item["id"] for item in parsed] != ["b", "a"]:
        raise AssertionError(f"Unexpected exported ids: {parsed}")


def test_build_protocol_frame_uses_local_time() -> None:
    """Test protocol rows with local dates and status tiers."""
    service = OutputService(OutputConfig(), "Europe/Berlin")

    df = service.build_protocol_frame(_readings())

    if list(df.columns) != ["Datum", "SYS", "DIA", "PULS", "Status"]:
        raise AssertionError(f"Unexpected columns: {list(df.columns)}")
    if df.iloc[0]["Datum"] != "15.03. 19:45":
        raise AssertionError(f"Unexpected local date: {df.iloc[0]['Datum']}")
    if df.iloc[0]["Status"] != "high":
        raise AssertionError(f"Unexpected status: {df.iloc[0]['Status']}")
    if df.iloc[1]["Status"] != "normal":
        raise AssertionError(f"Unexpected status: {df.iloc[1]['Status']}")


def test_write_protocol_csv(tmp_path) -> None:
    """Test that the protocol CSV can be read back."""
    service = OutputService(OutputConfig(dir=str(tmp_path)), "Europe/Berlin")

    path = service.write_protocol_csv(_readings())
    df = pd.read_csv(path)

    if len(df) != 2:
        raise AssertionError(f"Expected 2 rows, got {len(df)}")
    if df["SYS"].tolist() != [145, 120]:
        raise AssertionError(f"Unexpected SYS column: {df['SYS'].tolist()}")


def test_empty_protocol_frame() -> None:
    """Test that an empty ledger still yields the protocol columns."""
    df = OutputService(OutputConfig(), "Europe/Berlin").build_protocol_frame([])

    if not df.empty or list(df.columns) != ["Datum", "SYS", "DIA", "PULS", "Status"]:
        raise AssertionError("Expected empty frame with protocol columns")
