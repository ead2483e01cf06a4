"""Sensor readings, configuration records and rolling averages."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import datetime

from .dewpoint import round_double

MAX_SENSOR_DATA = 20
MIN_SENSOR_DATA = 5


@dataclass
class SensorData:
    """One reading of a sensor together with its metadata."""

    mac_address: str = ""
    name: str = ""
    bat_level: int = 0
    rssi: int = 0
    uptime: int = 0
    temperature: float = 0.0
    humidity: float = 0.0
    dew_point: float = 0.0
    scanned: datetime | None = None


@dataclass
class SensorCalibration:
    """Offsets added to raw temperature and humidity readings."""

    temperature: float = 0.0
    humidity: float = 0.0


@dataclass
class Sensors:
    """Latest readings and calibration of the inside and outside sensors."""

    inside_data: SensorData = field(default_factory=SensorData)
    inside_calibration: SensorCalibration = field(default_factory=SensorCalibration)
    outside_data: SensorData = field(default_factory=SensorData)
    outside_calibration: SensorCalibration = field(default_factory=SensorCalibration)


@dataclass
class FanConfig:
    """Thresholds that decide whether the fan runs."""

    min_diff: float = 0.0
    hysteresis: float = 0.0
    min_humidity_inside: float = 0.0
    min_temp_inside: float = 0.0
    min_temp_outside: float = 0.0


class Reason(enum.IntEnum):
    """Why the fan is, or is not, supposed to run."""

    NONE = 0
    NO_DATA = 1
    NO_ENOUGH_DATA = 2
    DEW_POINT_OVER_HYST = 3
    DEW_POINT_UNDER_HYST = 4
    DEW_POINT_IN_BETWEEN = 5
    INSIDE_TEMP_TOO_LOW = 6
    OUTSIDE_TEMP_TOO_LOW = 7
    INSIDE_HUMIDITY_TOO_LOW = 8
    SOFT_OVERRIDE_ON = 9
    SOFT_OVERRIDE_OFF = 10
    UNKNOWN = 11

    def label(self) -> str:
        """Short human-readable description."""
        return _REASON_LABELS[self]


_REASON_LABELS = {
    Reason.NONE: "none",
    Reason.NO_DATA: "no data",
    Reason.NO_ENOUGH_DATA: "not enough data",
    Reason.DEW_POINT_OVER_HYST: "dp > hysteresis",
    Reason.DEW_POINT_UNDER_HYST: "dp < hysteresis",
    Reason.DEW_POINT_IN_BETWEEN: "dp in between",
    Reason.INSIDE_TEMP_TOO_LOW: "inside temp too low",
    Reason.OUTSIDE_TEMP_TOO_LOW: "outside temp too low",
    Reason.INSIDE_HUMIDITY_TOO_LOW: "inside hum too low",
    Reason.SOFT_OVERRIDE_ON: "soft override on",
    Reason.SOFT_OVERRIDE_OFF: "soft override off",
    Reason.UNKNOWN: "unknown reason",
}


@dataclass
class ResultData:
    """Outcome of the fan control decision."""

    dp_diff: float = 0.0
    should_be_on: bool = False
    is_on: bool = False
    reason: Reason = Reason.NONE


@dataclass
class InfluxDbConfig:
    """Connection settings for the time-series database."""

    enabled: bool = False
    url: str = ""
    token: str = ""
    org: str = ""
    bucket: str = ""


class SensorDataList:
    """A bounded history of readings; the oldest is dropped when full.

    The capacity is at least five; smaller values are raised to five.
    """

    def __init__(
        self, max_data: int = MAX_SENSOR_DATA, data: Iterable[SensorData] | None = None
    ) -> None:
        self._max_data = max(max_data, MIN_SENSOR_DATA)
        self._data: list[SensorData] = list(data) if data is not None else []

    @property
    def max_data(self) -> int:
        return self._max_data

    def add(self, sensor_data: SensorData) -> None:
        """Append a reading, dropping the oldest one if the list is full."""
        if len(self._data) >= self._max_data:
            self._data.pop(0)
        self._data.append(sensor_data)

    def _average(self, values: Iterator[float]) -> float:
        if not self._data:
            return 0.0
        total = 0.0
        for value in values:
            total += value
        return round_double(total / len(self._data), 1)

    def average_temperature(self) -> float:
        """Mean temperature rounded to one decimal, 0 when empty."""
        return self._average(entry.temperature for entry in self._data)

    def average_humidity(self) -> float:
        """Mean humidity rounded to one decimal, 0 when empty."""
        return self._average(entry.humidity for entry in self._data)

    def average_dew_point(self) -> float:
        """Mean dew point rounded to one decimal, 0 when empty."""
        return self._average(entry.dew_point for entry in self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[SensorData]:
        return iter(self._data)


@dataclass
class SensorStore:
    """Reading histories of the inside and outside sensors."""

    inside: SensorDataList = field(default_factory=SensorDataList)
    outside: SensorDataList = field(default_factory=SensorDataList)