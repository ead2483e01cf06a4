import threading
import time
from datetime import datetime, timedelta

import pytest

from dewpointfan.control import Controller, FanState, compute_results
from dewpointfan.display import TerminalDisplay
from dewpointfan.gpio import DummyGpio, Gpio
from dewpointfan.sensor import FanConfig, Reason, ResultData, SensorData

NOW = datetime(2024, 5, 1, 12, 0, 0)


class RecordingGpio(Gpio):
    def __init__(self):
        self.calls = []

    def read_fan_sense(self):
        return bool(self.calls and self.calls[-1])

    def set_fan(self, on):
        self.calls.append(on)


CASES = [
    (
        "RemoteOverrideOn",
        SensorData(),
        SensorData(),
        1,
        FanConfig(),
        ResultData(should_be_on=True, reason=Reason.SOFT_OVERRIDE_ON),
        ResultData(should_be_on=False, reason=Reason.NONE),
    ),
    (
        "RemoteOverrideOff",
        SensorData(),
        SensorData(),
        2,
        FanConfig(),
        ResultData(should_be_on=False, reason=Reason.SOFT_OVERRIDE_OFF),
        ResultData(should_be_on=True, reason=Reason.NONE),
    ),
    (
        "NoDataInside",
        SensorData(scanned=None),
        SensorData(scanned=NOW),
        0,
        FanConfig(),
        ResultData(should_be_on=False, reason=Reason.NO_DATA),
        ResultData(should_be_on=True, reason=Reason.NONE),
    ),
    (
        "NoDataOutside",
        SensorData(scanned=NOW),
        SensorData(scanned=None),
        0,
        FanConfig(),
        ResultData(should_be_on=False, reason=Reason.NO_DATA),
        ResultData(should_be_on=True, reason=Reason.NONE),
    ),
    (
        "DataTooOld",
        SensorData(scanned=NOW - timedelta(minutes=10)),
        SensorData(scanned=NOW),
        0,
        FanConfig(),
        ResultData(should_be_on=False, reason=Reason.NO_ENOUGH_DATA),
        ResultData(should_be_on=True, reason=Reason.NONE),
    ),
    (
        "LowInsideTemperature",
        SensorData(temperature=18.0, scanned=NOW),
        SensorData(scanned=NOW),
        0,
        FanConfig(min_temp_inside=20.0),
        ResultData(should_be_on=False, reason=Reason.INSIDE_TEMP_TOO_LOW),
        ResultData(should_be_on=True, reason=Reason.NONE),
    ),
    (
        "LowOutsideTemperature",
        SensorData(temperature=21.0, scanned=NOW),
        SensorData(temperature=7.0, scanned=NOW),
        0,
        FanConfig(min_temp_outside=10.0),
        ResultData(should_be_on=False, reason=Reason.OUTSIDE_TEMP_TOO_LOW),
        ResultData(should_be_on=True, reason=Reason.NONE),
    ),
    (
        "LowInsideHumidity",
        SensorData(humidity=45.0, scanned=NOW),
        SensorData(scanned=NOW),
        0,
        FanConfig(min_humidity_inside=50.0),
        ResultData(should_be_on=False, reason=Reason.INSIDE_HUMIDITY_TOO_LOW),
        ResultData(should_be_on=True, reason=Reason.NONE),
    ),
    (
        "DewPointBelowHysteresis",
        SensorData(dew_point=10.0, scanned=NOW),
        SensorData(dew_point=7.0, scanned=NOW),
        0,
        FanConfig(min_diff=4.0),
        ResultData(should_be_on=False, reason=Reason.DEW_POINT_UNDER_HYST),
        ResultData(should_be_on=True, reason=Reason.NONE),
    ),
    (
        "DewPointAboveHysteresis",
        SensorData(dew_point=15.0, scanned=NOW),
        SensorData(dew_point=9.0, scanned=NOW),
        0,
        FanConfig(min_diff=4.0, hysteresis=2.0),
        ResultData(should_be_on=True, reason=Reason.DEW_POINT_OVER_HYST),
        ResultData(should_be_on=False, reason=Reason.NONE),
    ),
    (
        "DewPointInBetweenFromLow",
        SensorData(dew_point=13.0, scanned=NOW),
        SensorData(dew_point=9.0, scanned=NOW),
        0,
        FanConfig(min_diff=4.0, hysteresis=2.0),
        ResultData(should_be_on=False, reason=Reason.DEW_POINT_IN_BETWEEN),
        ResultData(should_be_on=False, reason=Reason.NONE),
    ),
    (
        "DewPointInBetweenFromHigh",
        SensorData(dew_point=13.0, scanned=NOW),
        SensorData(dew_point=9.0, scanned=NOW),
        0,
        FanConfig(min_diff=4.0, hysteresis=2.0),
        ResultData(should_be_on=True, reason=Reason.DEW_POINT_IN_BETWEEN),
        ResultData(should_be_on=True, reason=Reason.NONE),
    ),
]


@pytest.mark.parametrize(
    "inside, outside, override, config, expected, last",
    [case[1:] for case in CASES],
    ids=[case[0] for case in CASES],
)
def test_compute_results(inside, outside, override, config, expected, last):
    returned = compute_results(inside, outside, last, config, override, NOW)
    assert last == expected
    assert returned is last


def test_compute_results_fresh_data_just_inside_window():
    result = ResultData()
    inside = SensorData(dew_point=15.0, scanned=NOW - timedelta(minutes=4))
    outside = SensorData(dew_point=9.0, scanned=NOW)
    compute_results(inside, outside, result, FanConfig(min_diff=4.0, hysteresis=2.0), 0, NOW)
    assert result.reason is Reason.DEW_POINT_OVER_HYST
    assert result.should_be_on is True


def test_update_switches_fan_and_reads_back_state():
    state = FanState(remote_override=1)
    gpio = RecordingGpio()
    controller = Controller(state, None, gpio)
    result = controller.update(NOW)
    assert gpio.calls == [True]
    assert result.should_be_on is True
    assert result.is_on is True
    assert state.result.reason is Reason.SOFT_OVERRIDE_ON


def test_update_with_dummy_gpio_reports_fan_off():
    state = FanState(remote_override=1)
    gpio = DummyGpio()
    Controller(state, None, gpio).update(NOW)
    assert gpio.fan_state is True
    assert state.result.is_on is False
    assert state.result.should_be_on is True


def test_update_without_data_turns_fan_off():
    state = FanState()
    state.result.should_be_on = True
    gpio = RecordingGpio()
    Controller(state, None, gpio).update(NOW)
    assert gpio.calls == [False]
    assert state.result.reason is Reason.NO_DATA


def test_screen_sequence_cycles():
    controller = Controller(FanState(), TerminalDisplay(), DummyGpio())
    shown = [controller.show_next_screen() for _ in range(10)]
    assert shown == [
        "main", "result", "info", "main", "result",
        "info", "main", "result", "start", "main",
    ]


def test_screens_are_drawn_on_display():
    display = TerminalDisplay()
    controller = Controller(FanState(), display, DummyGpio(), "build-1", "10.0.0.5")
    controller.show_next_screen()
    assert display.rows[0].rstrip() == "DPF   Inside Outside"
    controller.show_next_screen()
    assert display.rows[0].startswith("Fan is OFF (OFF)")
    for _ in range(7):
        controller.show_next_screen()
    assert display.rows[0].rstrip() == "DewPointFan BT v1"
    assert display.rows[1].rstrip() == "build-1"
    assert display.rows[3].rstrip() == "IP: 10.0.0.5"


def test_run_stops_on_event_and_draws_screens():
    display = TerminalDisplay()
    gpio = RecordingGpio()
    controller = Controller(FanState(), display, gpio)
    stop = threading.Event()
    worker = threading.Thread(target=controller.run, args=(0.01, stop))
    worker.start()
    deadline = time.monotonic() + 5
    while not display.rows[0].strip() and time.monotonic() < deadline:
        time.sleep(0.01)
    stop.set()
    worker.join(timeout=5)
    assert not worker.is_alive()
    assert display.rows[0].rstrip() == "DPF   Inside Outside"
    assert gpio.calls and gpio.calls[0] is False


def test_run_with_stop_already_set_does_nothing():
    gpio = RecordingGpio()
    stop = threading.Event()
    stop.set()
    Controller(FanState(), TerminalDisplay(), gpio).run(0.01, stop)
    assert gpio.calls == []