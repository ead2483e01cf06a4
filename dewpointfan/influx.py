"""Periodic upload of averaged readings to a time-series database."""

from __future__ import annotations

import logging
import threading
import urllib.request
from datetime import datetime
from urllib.parse import urlencode

from .control import FanState
from .sensor import InfluxDbConfig

logger = logging.getLogger(__name__)

TICK_INTERVAL = 60.0
MIN_REQUIRED_SAMPLES = 10
MEASUREMENT_NAME = "dp"
_TIMEOUT = 10.0


def _format_field(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return f"{value}i"
    return repr(float(value))


def _timestamp_ns(now: datetime) -> int:
    seconds = int(now.replace(microsecond=0).timestamp())
    return seconds * 1_000_000_000 + now.microsecond * 1000


class InfluxSender:
    """Writes averaged sensor values as line-protocol points."""

    def __init__(self, config: InfluxDbConfig, state: FanState) -> None:
        self.config = config
        self.state = state

    def has_enough_data(self) -> bool:
        """Whether both histories hold at least the minimum number of samples."""
        store = self.state.store
        return (
            len(store.inside) >= MIN_REQUIRED_SAMPLES
            and len(store.outside) >= MIN_REQUIRED_SAMPLES
        )

    def create_point(self, now: datetime | None = None) -> str:
        """Build the line-protocol record for the current averages."""
        if now is None:
            now = datetime.now()
        state = self.state
        with state.lock:
            inside = state.store.inside
            outside = state.store.outside
            fields: dict[str, object] = {
                "temp_i": inside.average_temperature(),
                "temp_o": outside.average_temperature(),
                "dewpoint_i": inside.average_dew_point(),
                "dewpoint_o": outside.average_dew_point(),
                "hum_i": inside.average_humidity(),
                "hum_o": outside.average_humidity(),
                "retry_i": 0,
                "retry_o": 0,
                "vent_val": 1 if state.result.is_on else 0,
            }
        encoded = ",".join(
            f"{key}={_format_field(fields[key])}" for key in sorted(fields)
        )
        return f"{MEASUREMENT_NAME} {encoded} {_timestamp_ns(now)}"

    def _write(self, line: str) -> None:
        query = urlencode(
            {"org": self.config.org, "bucket": self.config.bucket, "precision": "ns"}
        )
        request = urllib.request.Request(
            f"{self.config.url.rstrip('/')}/api/v2/write?{query}",
            data=line.encode("utf-8"),
            method="POST",
            headers={
                "Authorization": f"Token {self.config.token}",
                "Content-Type": "text/plain; charset=utf-8",
            },
        )
        with urllib.request.urlopen(request, timeout=_TIMEOUT) as response:
            response.read()

    def send(self, now: datetime | None = None) -> bool:
        """Upload one point if enough data is present; returns whether it was written."""
        store = self.state.store
        if not self.has_enough_data():
            logger.warning(
                "NOT sending to InfluxDB due to insufficient data (Inside/Outside): %d, %d",
                len(store.inside),
                len(store.outside),
            )
            return False
        logger.info(
            "Sending average values to InfluxDB (Inside/Outside): %d, %d",
            len(store.inside),
            len(store.outside),
        )
        try:
            self._write(self.create_point(now))
        except OSError as exc:
            logger.error("%s", exc)
            return False
        logger.info(
            "Inside  (T/H): %5.1fC - %5.1f%%",
            store.inside.average_temperature(),
            store.inside.average_humidity(),
        )
        logger.info(
            "Outside (T/H): %5.1fC - %5.1f%%",
            store.outside.average_temperature(),
            store.outside.average_humidity(),
        )
        return True

    def run(self, stop_event: threading.Event | None = None) -> None:
        """Send a point every minute until ``stop_event`` is set."""
        stop = stop_event if stop_event is not None else threading.Event()
        while not stop.wait(TICK_INTERVAL):
            self.send()