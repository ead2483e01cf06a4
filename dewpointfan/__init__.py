"""Dew point based fan control: sensor decoding, decisions, display screens, HTTP and InfluxDB."""

__version__ = "1.0.0"

__all__ = [
    "control",
    "dewpoint",
    "display",
    "gpio",
    "influx",
    "network",
    "scanner",
    "screens",
    "sensor",
    "web",
]