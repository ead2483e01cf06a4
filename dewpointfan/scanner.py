"""Decoding of ThermoBeacon WS02 advertisements."""

from __future__ import annotations

import logging
import struct
from datetime import datetime

from .dewpoint import calc_dew_point, round_double
from .sensor import SensorData, Sensors, SensorStore

logger = logging.getLogger(__name__)

BEACON_NAME = "ThermoBeacon"
PAYLOAD_LENGTH = 18

_MAC_OFFSET = 2
_BAT_OFFSET = 8
_TEMP_OFFSET = 10
_HUMIDITY_OFFSET = 12
_UPTIME_OFFSET = 14


def is_thermobeacon(local_name: str) -> bool:
    """Whether an advertised local name belongs to a ThermoBeacon sensor."""
    return local_name == BEACON_NAME


def _decode_reading(payload: bytes, offset: int) -> float:
    (raw,) = struct.unpack_from("<H", payload, offset)
    value = raw / 16.0
    if value > 4000:
        value -= 4096
    return value


def parse_ws02_data(
    payload: bytes, rssi: int, sensors: Sensors, now: datetime | None = None
) -> SensorData:
    """Decode a WS02 manufacturer payload into a calibrated reading.

    The sensor is named "Inside" or "Outside" when its MAC address matches a
    known sensor, otherwise the name is empty and no calibration is applied.
    """
    if len(payload) < PAYLOAD_LENGTH:
        raise ValueError(
            f"WS02 payload needs {PAYLOAD_LENGTH} bytes, got {len(payload)}"
        )
    payload = bytes(payload)

    mac = ":".join(
        f"{byte:02X}" for byte in reversed(payload[_MAC_OFFSET:_MAC_OFFSET + 6])
    )
    name = ""
    temp_cal = 0.0
    hum_cal = 0.0
    if mac == sensors.inside_data.mac_address:
        name = "Inside"
        temp_cal = sensors.inside_calibration.temperature
        hum_cal = sensors.inside_calibration.humidity
    elif mac == sensors.outside_data.mac_address:
        name = "Outside"
        temp_cal = sensors.outside_calibration.temperature
        hum_cal = sensors.outside_calibration.humidity

    (bat_level,) = struct.unpack_from("<H", payload, _BAT_OFFSET)
    (uptime,) = struct.unpack_from("<I", payload, _UPTIME_OFFSET)

    temperature = round_double(_decode_reading(payload, _TEMP_OFFSET) + temp_cal, 1)
    humidity = round_double(_decode_reading(payload, _HUMIDITY_OFFSET) + hum_cal, 1)

    return SensorData(
        mac_address=mac,
        name=name,
        bat_level=bat_level,
        rssi=rssi,
        uptime=uptime,
        temperature=temperature,
        humidity=humidity,
        dew_point=calc_dew_point(temperature, humidity),
        scanned=now if now is not None else datetime.now(),
    )


def format_uptime(seconds: int) -> str:
    """Format an uptime in seconds as "Xd Yh Zm"."""
    days, rest = divmod(seconds, 24 * 3600)
    hours = rest // 3600
    minutes = (seconds % 3600) // 60
    return f"{days}d {hours}h {minutes}m"


def process_advertisement(
    payload: bytes,
    rssi: int,
    sensors: Sensors,
    store: SensorStore,
) -> SensorData | None:
    """Record a reading from an advertisement payload if it is from a known sensor.

    Returns the reading that was recorded, or None when the payload has the
    wrong length or comes from an unknown sensor.
    """
    if len(payload) != PAYLOAD_LENGTH:
        return None
    reading = parse_ws02_data(payload, rssi, sensors)
    if not reading.name:
        return None
    if reading.name == "Inside":
        sensors.inside_data = reading
        store.inside.add(reading)
    else:
        sensors.outside_data = reading
        store.outside.add(reading)
    logger.info(
        "%8s Temp: %.1f°C - Hum: %.1f%% - Bat: %d - RSSI: %d - Uptime: %s",
        reading.name,
        reading.temperature,
        reading.humidity,
        reading.bat_level,
        reading.rssi,
        format_uptime(reading.uptime),
    )
    return reading