"""CSV flight logging with the summary forwarded to a radio link."""

from __future__ import annotations

import csv
import logging
from collections.abc import Callable
from pathlib import Path
from typing import IO, Any

from flightlink.transponder import TransponderState

log = logging.getLogger(__name__)

CSV_HEADER = (
    "Time",
    "FlightID",
    "GNSS Valid",
    "Latitude",
    "Longitude",
    "Barometric Pressure",
)


class FlightLogger:
    """Writes transponder data to numbered CSV files and forwards a summary.

    ``send`` receives the one-line summary of each logged sample, for
    example to transmit it over the radio.  Logging happens only while
    ``is_logging`` is true; ``start`` sets it and ``stop`` clears it.
    """

    def __init__(self, directory: str | Path = ".", send: Callable[[str], Any] | None = None) -> None:
        self.directory = Path(directory)
        self.send = send
        self.is_logging = False
        self.path: Path | None = None
        self._next_index = 0
        self._file: IO[str] | None = None
        self._writer: Any = None

    def unique_filename(self) -> Path:
        """Return the next LOG<n>.csv path that does not exist yet."""
        while True:
            candidate = self.directory / f"LOG{self._next_index}.csv"
            self._next_index += 1
            if not candidate.exists():
                return candidate

    def start(self) -> Path:
        """Open a fresh log file, write the header and enable logging."""
        self.stop()
        path = self.unique_filename()
        log.info("Opening file: %s", path)
        self._file = open(path, "w", newline="", encoding="utf-8")
        self._writer = csv.writer(self._file)
        self._writer.writerow(CSV_HEADER)
        self._file.flush()
        self.path = path
        self.is_logging = True
        log.info("Logging to: %s", path)
        return path

    def stop(self) -> None:
        """Disable logging and close the current file, if any."""
        self.is_logging = False
        if self._file is not None:
            self._file.close()
            self._file = None
            self._writer = None
            log.info("File closed.")

    def log(self, state: TransponderState, now_ms: int) -> str | None:
        """Forward and record one sample; return its summary, or None when idle."""
        if not self.is_logging:
            return None
        summary = state.summary()
        if self.send is not None:
            log.info("Sending: %s", summary)
            self.send(summary)
        if self._writer is not None and self._file is not None:
            self._writer.writerow(
                [
                    now_ms,
                    state.ownship.flight_identification,
                    state.heartbeat.gnss_valid,
                    f"{state.ownship.latitude:.6f}",
                    f"{state.ownship.longitude:.6f}",
                    f"{state.barometer.barometric_pressure:.6f}",
                ]
            )
            self._file.flush()
        log.info("Logged: %s", summary)
        return summary

    def __enter__(self) -> FlightLogger:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()