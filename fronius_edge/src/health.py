"""
Health file writer for the collector.

Writes a JSON health file at a configurable path with four fields:
- last_cycle_ts: ISO timestamp of the most recently completed cycle.
- last_write_ts: ISO timestamp of the most recent cycle that wrote at least
  one record to InfluxDB.
- records_written: Number of records written by the last cycle.
- failed_categories: Categories that failed to fetch or write in the last
  cycle.

The file is rewritten after every cycle, providing a simple liveness signal
that a Docker HEALTHCHECK or monitoring can inspect.

CHANGELOG:
- 2026-10-16: Initial creation

TODO:
- None
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fronius_edge.src.collector import CycleReport


class HealthWriter:
    """Writes collector health status to a JSON file.

    Args:
        path: Filesystem path for the health JSON file. Accepts str or Path.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._last_cycle_ts: str | None = None
        self._last_write_ts: str | None = None
        self._records_written: int = 0
        self._failed_categories: list[str] = []

    def record_cycle(self, report: CycleReport) -> None:
        """Record a completed cycle and write the health file."""
        now = datetime.now(tz=UTC).isoformat()
        self._last_cycle_ts = now
        self._records_written = len(report.written)
        self._failed_categories = report.failed_categories()
        if report.written:
            self._last_write_ts = now
        self._write()

    def record_cycle_error(self) -> None:
        """Record a cycle that aborted before dispatching anything."""
        self._last_cycle_ts = datetime.now(tz=UTC).isoformat()
        self._records_written = 0
        self._failed_categories = []
        self._write()

    def _write(self) -> None:
        data = {
            "last_cycle_ts": self._last_cycle_ts,
            "last_write_ts": self._last_write_ts,
            "records_written": self._records_written,
            "failed_categories": self._failed_categories,
        }
        self.path.write_text(json.dumps(data))
