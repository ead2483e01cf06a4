"""HTTP interface showing sensor averages and accepting a fan override."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any
from urllib.parse import urlsplit

from .control import FanState

logger = logging.getLogger(__name__)

WEB_HOST = "0.0.0.0"
WEB_PORT = 8080

_TEXT = "text/plain; charset=utf-8"
_JSON = "application/json"
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_STATE_TEXT = {True: "ON", False: "OFF"}


def _json_number(value: float) -> float | int:
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return int(value)
    return value


def _decode_override(body: bytes | str) -> int:
    text = body.decode("utf-8") if isinstance(body, (bytes, bytearray)) else body
    text = text.lstrip()
    if not text:
        raise ValueError("EOF")
    value, _ = json.JSONDecoder().raw_decode(text)
    if value is None:
        return 0
    if not isinstance(value, dict):
        raise ValueError(
            f"json: cannot unmarshal {type(value).__name__} into remote control"
        )
    if "override" in value:
        override = value["override"]
    else:
        override = next(
            (item for key, item in value.items() if key.lower() == "override"), None
        )
    if override is None:
        return 0
    if isinstance(override, bool) or not isinstance(override, int):
        raise ValueError("json: override must be an integer")
    if not _INT64_MIN <= override <= _INT64_MAX:
        raise ValueError("json: override out of range")
    return override


class WebService:
    """The request handlers, independent of any HTTP server."""

    def __init__(self, state: FanState) -> None:
        self.state = state

    def main_page(self) -> str:
        """Plain-text overview of averages and fan state."""
        state = self.state
        with state.lock:
            inside = state.store.inside
            outside = state.store.outside
            diff = inside.average_dew_point() - outside.average_dew_point()
            should_be_on = _STATE_TEXT[bool(state.result.should_be_on)]
            is_on = _STATE_TEXT[bool(state.result.is_on)]
            lines = [
                "Dew Point Fan",
                "-----------------------------------------------------",
                f"Inside   DP: {inside.average_dew_point():6.1f}, "
                f"Temp: {inside.average_temperature():5.1f}°C, "
                f"Humidity: {inside.average_humidity():5.1f}%",
                f"Outside  DP: {outside.average_dew_point():6.1f}, "
                f"Temp: {outside.average_temperature():5.1f}°C, "
                f"Humidity: {outside.average_humidity():5.1f}%",
                f"Diff     DP: {diff:6.1f}",
                f"Fan should be {should_be_on}"
                f"                         Fan is {is_on}",
            ]
        return "\n".join(lines)

    def _sensor_entries(self) -> list[dict[str, Any]]:
        store = self.state.store
        return [
            {
                "name": name,
                "temperature": _json_number(history.average_temperature()),
                "humidity": _json_number(history.average_humidity()),
                "dew_point": _json_number(history.average_dew_point()),
            }
            for name, history in (("Inside", store.inside), ("Outside", store.outside))
        ]

    def info(self, now: datetime | None = None) -> dict[str, Any]:
        """Current readings and fan decision as a JSON-ready mapping."""
        if now is None:
            now = datetime.now()
        state = self.state
        with state.lock:
            result = state.result
            return {
                "update": now.strftime("%Y-%m-%d %H:%M:%S"),
                "sensors": self._sensor_entries(),
                "reason": int(result.reason),
                "venting": result.should_be_on,
                "override": result.should_be_on != result.is_on,
                "remote_override": state.remote_override,
                "diff_min": _json_number(state.fan_config.min_diff),
                "hysteresis": _json_number(state.fan_config.hysteresis),
            }

    def override(self, body: bytes | str) -> dict[str, int]:
        """Set the remote override from a JSON body such as ``{"override": 1}``.

        Raises ValueError when the body is not a valid override document.
        """
        logger.info("POST API called")
        value = _decode_override(body)
        logger.info("POST API called with override: %d", value)
        with self.state.lock:
            self.state.remote_override = value
        return {"override": value}

    def handle(
        self, method: str, path: str, body: bytes | str = b""
    ) -> tuple[int, str, bytes]:
        """Route a request; returns status code, content type and body."""
        route = urlsplit(path).path
        if route == "/info":
            if method != "GET":
                return _error(405, "Method not allowed")
            return 200, _JSON, _dump(self.info())
        if route == "/override":
            if method != "POST":
                return _error(405, "Method not allowed")
            try:
                answer = self.override(body)
            except ValueError as exc:
                return _error(400, str(exc))
            return 200, _JSON, _dump(answer)
        return 200, _TEXT, self.main_page().encode("utf-8")


def _dump(value: Any) -> bytes:
    return json.dumps(value, indent=2, ensure_ascii=False).encode("utf-8")


def _error(status: int, message: str) -> tuple[int, str, bytes]:
    return status, _TEXT, (message + "\n").encode("utf-8")


def create_server(
    service: WebService, host: str = WEB_HOST, port: int = WEB_PORT
) -> ThreadingHTTPServer:
    """Build an HTTP server that dispatches every request to ``service``."""

    class _Handler(BaseHTTPRequestHandler):
        def _dispatch(self) -> None:
            length = int(self.headers.get("Content-Length") or 0)
            body = self.rfile.read(length) if length > 0 else b""
            status, content_type, payload = service.handle(self.command, self.path, body)
            self.send_response(status)
            self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(len(payload)))
            self.end_headers()
            self.wfile.write(payload)

        do_GET = _dispatch
        do_POST = _dispatch
        do_PUT = _dispatch
        do_DELETE = _dispatch
        do_PATCH = _dispatch

        def log_message(self, format: str, *args: Any) -> None:
            logger.debug(format, *args)

    return ThreadingHTTPServer((host, port), _Handler)