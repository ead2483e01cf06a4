"""Fan control decisions and the loop that drives the relay and the display."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from .display import Display
from .gpio import Gpio
from .screens import info_screen, main_screen, result_screen, start_screen
from .sensor import (
    FanConfig,
    Reason,
    ResultData,
    SensorData,
    Sensors,
    SensorStore,
)

logger = logging.getLogger(__name__)

STALE_AFTER = timedelta(minutes=5)
OVERRIDE_ON = 1

_SCREEN_SEQUENCE = (
    "main",
    "result",
    "info",
    "main",
    "result",
    "info",
    "main",
    "result",
    "start",
)


def compute_results(
    inside: SensorData,
    outside: SensorData,
    result: ResultData,
    fan_config: FanConfig,
    remote_override: int = 0,
    now: datetime | None = None,
) -> ResultData:
    """Decide whether the fan should run and record the decision in ``result``.

    ``result`` is updated in place and returned. When the dew point difference
    lies inside the hysteresis band the previous fan decision is kept.
    A positive ``remote_override`` forces the fan: 1 on, anything else off.
    """
    if remote_override > 0:
        if remote_override == OVERRIDE_ON:
            result.should_be_on = True
            result.reason = Reason.SOFT_OVERRIDE_ON
        else:
            result.should_be_on = False
            result.reason = Reason.SOFT_OVERRIDE_OFF
        return result

    if inside.scanned is None or outside.scanned is None:
        result.should_be_on = False
        result.reason = Reason.NO_DATA
        return result

    if now is None:
        now = datetime.now()
    cutoff = now - STALE_AFTER
    if inside.scanned < cutoff or outside.scanned < cutoff:
        result.should_be_on = False
        result.reason = Reason.NO_ENOUGH_DATA
        return result

    if inside.temperature < fan_config.min_temp_inside:
        result.should_be_on = False
        result.reason = Reason.INSIDE_TEMP_TOO_LOW
        return result
    if outside.temperature < fan_config.min_temp_outside:
        result.should_be_on = False
        result.reason = Reason.OUTSIDE_TEMP_TOO_LOW
        return result
    if inside.humidity < fan_config.min_humidity_inside:
        result.should_be_on = False
        result.reason = Reason.INSIDE_HUMIDITY_TOO_LOW
        return result

    delta = inside.dew_point - outside.dew_point
    upper = fan_config.min_diff + fan_config.hysteresis
    if delta < fan_config.min_diff:
        result.should_be_on = False
        result.reason = Reason.DEW_POINT_UNDER_HYST
        return result
    if delta >= upper:
        result.should_be_on = True
        result.reason = Reason.DEW_POINT_OVER_HYST
        return result
    if fan_config.min_diff <= delta < upper:
        # Rising or falling is unknown here, so the fan keeps its state.
        result.reason = Reason.DEW_POINT_IN_BETWEEN
        return result

    result.should_be_on = False
    result.reason = Reason.UNKNOWN
    return result


@dataclass
class FanState:
    """Everything shared between the scanner, the control loop and the services."""

    sensors: Sensors = field(default_factory=Sensors)
    store: SensorStore = field(default_factory=SensorStore)
    result: ResultData = field(default_factory=ResultData)
    fan_config: FanConfig = field(default_factory=FanConfig)
    remote_override: int = 0
    lock: threading.RLock = field(
        default_factory=threading.RLock, repr=False, compare=False
    )


class Controller:
    """Applies control decisions to the fan relay and cycles display screens."""

    def __init__(
        self,
        state: FanState,
        display: Display | None = None,
        gpio: Gpio | None = None,
        build_time: str = "---",
        ip_address: str = "",
    ) -> None:
        self.state = state
        self.display = display
        self.gpio = gpio
        self.build_time = build_time
        self.ip_address = ip_address
        self._step = 0

    def update(self, now: datetime | None = None) -> ResultData:
        """Recompute the decision, switch the fan and read back its state."""
        state = self.state
        with state.lock:
            compute_results(
                state.sensors.inside_data,
                state.sensors.outside_data,
                state.result,
                state.fan_config,
                state.remote_override,
                now,
            )
            if self.gpio is not None:
                self.gpio.set_fan(state.result.should_be_on)
                state.result.is_on = self.gpio.read_fan_sense()
            return state.result

    def show_next_screen(self) -> str:
        """Draw the next screen of the cycle and return its name."""
        screen = _SCREEN_SEQUENCE[self._step]
        self._step = (self._step + 1) % len(_SCREEN_SEQUENCE)
        display = self.display
        if display is None:
            return screen
        state = self.state
        with state.lock:
            inside = state.sensors.inside_data
            outside = state.sensors.outside_data
            if screen == "main":
                main_screen(display, inside, outside)
            elif screen == "result":
                result_screen(display, state.result, inside, outside, state.fan_config)
            elif screen == "info":
                info_screen(display, inside, outside)
            else:
                start_screen(display, self.build_time, self.ip_address)
        return screen

    def run(self, interval: float, stop_event: threading.Event | None = None) -> None:
        """Update the fan and show one screen per ``interval`` seconds until stopped."""
        stop = stop_event if stop_event is not None else threading.Event()
        while not stop.is_set():
            self.update()
            if stop.wait(interval):
                break
            self.show_next_screen()