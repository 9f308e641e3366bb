"""
Output service for writing ledger exports and printable protocols.

Handles the dated JSON export file and the protocol table (console text or CSV).
"""

import logging
from datetime import date
from pathlib import Path

import pandas as pd

from bp_ledger.domain.reading import Reading
from bp_ledger.services.export import export_document
from bp_ledger.utils.exceptions import OutputError
from bp_ledger.utils.parameters import OutputConfig
from bp_ledger.utils.timezone_utils import utc_to_local

logger = logging.getLogger(__name__)

PROTOCOL_DATE_FORMAT = "%d.%m. %H:%M"
PROTOCOL_COLUMNS = ["Datum", "SYS", "DIA", "PULS", "Status"]


class OutputService:
    """
    Service for writing ledger data to output files.

    Dates in the protocol are shown in local time of the configured timezone.
    """

    def __init__(self, config: OutputConfig, timezone: str) -> None:
        """
        Initialize output service.

        Args:
            config: Output configuration.
            timezone: Timezone for protocol dates.
        """
        self.config = config
        self.timezone = timezone
        self.output_dir = Path(config.dir)

    def export_file_name(self, today: date) -> str:
        """File name of an export written on ``today``."""
        return self.config.export_file_template.format(date=today.isoformat())

    def write_export(self, readings: list[Reading], today: date) -> Path:
        """
        Write the export document to a dated file.

        Args:
            readings: Readings to export, newest first.
            today: Date used in the file name.

        Returns:
            Path of the written file.
        """
        export_path = self.output_dir / self.export_file_name(today)

        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            with open(export_path, "w", encoding="utf-8") as f:
                f.write(export_document(readings, indent=self.config.indent))
        except OSError as e:
            raise OutputError(f"Failed to write export {export_path}: {e}") from e

        logger.info(f"Wrote {len(readings)} readings to {export_path}")
        return export_path

    def build_protocol_frame(self, readings: list[Reading]) -> pd.DataFrame:
        """
        Build the printable protocol table.

        Args:
            readings: Readings in display order.

        Returns:
            DataFrame with one row per reading.
        """
        rows = [
            {
                "Datum": utc_to_local(r.date, self.timezone).strftime(PROTOCOL_DATE_FORMAT),
                "SYS": r.sys,
                "DIA": r.dia,
                "PULS": r.puls,
                "Status": r.status.value,
            }
            for r in readings
        ]
        return pd.DataFrame(rows, columns=PROTOCOL_COLUMNS)

    def write_protocol_csv(self, readings: list[Reading]) -> Path:
        """
        Write the protocol table to CSV.

        Args:
            readings: Readings in display order.

        Returns:
            Path of the written file.
        """
        csv_path = self.output_dir / self.config.protocol_csv
        df = self.build_protocol_frame(readings)

        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            df.to_csv(csv_path, index=False, encoding="utf-8")
        except OSError as e:
            raise OutputError(f"Failed to write protocol {csv_path}: {e}") from e

        logger.info(f"Wrote protocol with {len(df)} rows to {csv_path}")
        return csv_path
