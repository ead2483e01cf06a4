"""The screens shown on the character display."""

from __future__ import annotations

from datetime import datetime

from .display import Display
from .sensor import FanConfig, ResultData, SensorData

_MAX_LAST_SEEN = 9999
_STATE_TEXT = {True: "ON", False: "OFF"}


def print_line(display: Display, line: int, text: str, scroll: bool = False) -> None:
    """Trim ``text`` and show it on ``line``."""
    if scroll:
        display.print_line(line, text.strip(), scroll)
    else:
        display.print_line(line, text.rstrip(" "), scroll)


def format_up_days(seconds: int) -> str:
    """Format an uptime in seconds as whole days, e.g. "3d"."""
    return f"{seconds // (24 * 3600)}d"


def start_screen(display: Display, build_time: str, ip: str) -> None:
    """Show the start-up banner with build time and IP address."""
    print_line(display, 0, "DewPointFan BT v1")
    print_line(display, 1, build_time)
    print_line(display, 2, "")
    print_line(display, 3, "IP: " + ip)


def main_screen(display: Display, inside: SensorData, outside: SensorData) -> None:
    """Show temperature, humidity and dew point of both sensors."""
    print_line(display, 0, "DPF   Inside Outside")
    print_line(display, 1, f"Temp: {inside.temperature:5.1f}C  {outside.temperature:5.1f}C")
    print_line(display, 2, f"Hum:  {inside.humidity:5.1f}%  {outside.humidity:5.1f}%")
    print_line(display, 3, f"DP:   {inside.dew_point:5.1f}C  {outside.dew_point:5.1f}C")


def info_screen(display: Display, inside: SensorData, outside: SensorData) -> None:
    """Show signal strength, battery level and uptime of both sensors."""
    print_line(display, 0, "DPF   Inside Outside")
    print_line(display, 1, f"RSSI:{inside.rssi:7d} {outside.rssi:7d}")
    print_line(display, 2, f"Bat: {inside.bat_level:7d} {outside.bat_level:7d}")
    print_line(
        display,
        3,
        f"Up:  {format_up_days(inside.uptime):>7} {format_up_days(outside.uptime):>7}",
    )


def _last_seen(scanned: datetime | None, now: datetime) -> int:
    if scanned is None:
        return _MAX_LAST_SEEN
    return int(min((now - scanned).total_seconds(), _MAX_LAST_SEEN))


def result_screen(
    display: Display,
    result: ResultData,
    inside: SensorData,
    outside: SensorData,
    fan_config: FanConfig,
    now: datetime | None = None,
) -> None:
    """Show the fan state, its reason, the dew point difference and sensor ages."""
    if now is None:
        now = datetime.now()
    inside_seen = _last_seen(inside.scanned, now)
    outside_seen = _last_seen(outside.scanned, now)
    threshold = fan_config.min_diff + fan_config.hysteresis
    diff = inside.dew_point - outside.dew_point
    is_on = _STATE_TEXT[bool(result.is_on)]
    should_be_on = _STATE_TEXT[bool(result.should_be_on)]
    print_line(display, 0, f"Fan is {is_on} ({should_be_on})")
    print_line(display, 1, f" {result.reason.label():>18} ")
    print_line(display, 2, f"Dp diff:{diff:5.1f}C ({threshold:3.1f})")
    print_line(display, 3, f"In/Out:  {inside_seen:4d}s {outside_seen:4d}s")