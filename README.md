# dewpointfan

A library that decides whether a ventilation fan should run. It compares the
dew point inside a room with the dew point outside. The readings come from
two "ThermoBeacon" (WS02) BLE thermo-hygrometers. The library decodes their
advertisement payloads, keeps a short history of readings and makes the fan
decision. It can draw status screens onto a character display, serve the
state over HTTP and upload averages to InfluxDB.

## How the decision is made

`dewpointfan.control.compute_results(inside, outside, result, fan_config,
remote_override=0, now=None)` updates the `ResultData` passed in as `result`
and also returns it. It works through these checks in order and stops at the
first one that applies:

1. A positive remote override. `1` forces the fan on and any other positive
   value forces it off.
2. A reading from either sensor is missing (`scanned is None`): off.
3. A reading is more than five minutes older than `now`: off.
4. The inside temperature, outside temperature or inside humidity is below
   the configured minimum: off.
5. The dew point difference (inside minus outside) is below `min_diff`: off.
6. The difference is at or above `min_diff + hysteresis`: on.
7. The difference lies in between: `should_be_on` keeps its previous value.

Each outcome is recorded as a `Reason`. `Reason.label()` returns the short
text shown on the display, for example `"dp > hysteresis"`.

## Dew point

```python
from dewpointfan.dewpoint import calc_dew_point, round_double

calc_dew_point(25.0, 80.0)      # 21.3 (°C, rounded to one decimal)
calc_dew_point(0.0, 0.0)        # -inf
round_double(123.456, 2)        # 123.46
round_double(-123.756, 0)       # -124.0 (halves round away from zero)
```

`calc_dew_point` uses the Magnus formula. It has one set of coefficients for
temperatures at or above 0 °C and another for temperatures below.

## Sensor data

`dewpointfan.sensor` holds the data types: `SensorData`,
`SensorCalibration`, `Sensors`, `FanConfig`, `ResultData`, `InfluxDbConfig`
and the `Reason` enumeration.

`SensorDataList(max_data=20, data=None)` is a bounded history of readings.
When it is full, `add()` drops the oldest reading. A capacity below 5 is
raised to 5 (see `max_data`). It supports `len()` and iteration. It averages
temperature, humidity and dew point to one decimal place, and each average is
0 when the list is empty.

```python
from dewpointfan.sensor import SensorData, SensorDataList

history = SensorDataList(20, [])
history.add(SensorData(temperature=20.5, humidity=50.0, dew_point=9.8))
history.add(SensorData(temperature=22.0, humidity=60.0, dew_point=13.9))
len(history)                    # 2
history.average_temperature()   # 21.3
```

`SensorStore` pairs an `inside` and an `outside` `SensorDataList`.

## Parsing advertisements

`dewpointfan.scanner` decodes the 18-byte manufacturer payload of WS02 /
ThermoBeacon sensors. It reads the MAC address, battery level, temperature,
humidity and uptime. It then applies the calibration offsets of the sensor
whose MAC address matches and works out the dew point.

- `is_thermobeacon(local_name)` is true for the advertised name
  `"ThermoBeacon"`.
- `parse_ws02_data(payload, rssi, sensors, now=None)` returns a `SensorData`
  whose name is `"Inside"`, `"Outside"`, or empty when the MAC address is not
  configured. It raises `ValueError` for a payload shorter than 18 bytes.
- `process_advertisement(payload, rssi, sensors, store)` handles a payload of
  exactly 18 bytes. If it comes from a known sensor, the function stores the
  reading as that sensor's current data, adds it to the history and returns
  it. In every other case it returns `None`.
- `format_uptime(seconds)` formats an uptime as, for example, `"1d 2h 3m"`.

## Network address

`dewpointfan.network.local_ip_address()` logs the host's IPv4 addresses and
returns a non-loopback one (via psutil). `first_ipv4_address(addresses)`
makes the same choice from any iterable of address strings. It strips a
`/prefix` suffix and skips `127.0.*` addresses. When several addresses
qualify, the last one is returned.

## Display, GPIO and control loop

- `dewpointfan.display.Display` is the abstract interface for a
  line-oriented character display. `TerminalDisplay` implements it as a
  20×4 display kept in memory, with its content available as `rows`. It pads
  each line to the width, or cuts it to the width. A cut keeps the tail of
  the text when `scroll` is set and the head otherwise.
- `dewpointfan.screens` draws the start, main, info and result screens onto
  any `Display`.
- `dewpointfan.gpio.Gpio` is the abstract interface for the fan relay.
  `DummyGpio` records the requested state and always senses the fan as off.
- `dewpointfan.control.FanState` holds the shared state. That is the
  sensors, the history, the fan configuration, the result, the remote
  override, and a lock that guards them.
- `dewpointfan.control.Controller(state, display=None, gpio=None, ...)`:
  - `update(now)` recomputes the result, switches the fan and reads back
    its state.
  - `show_next_screen()` draws the next screen of a nine-step rotation
    (main, result and info three times, with the start screen last) and
    returns its name.
  - `run(interval, stop_event)` repeats both until the event is set.

## HTTP interface

`dewpointfan.web.WebService(state)` serves these routes through
`handle(method, path, body)`:

- `/`, and any other path not listed here: a plain-text summary of the
  averaged values and the fan state.
- `GET /info`: a JSON document with both sensors' averages, the reason code,
  the `venting` and `override` flags, the remote override value, `diff_min`
  and `hysteresis`.
- `POST /override`: takes `{"override": <int>}`, stores it as the remote
  override and echoes it back.

Any other method on `/info` or `/override` gets a 405 response. A body that
is not a valid override document gets a 400 response.
`create_server(service, host="0.0.0.0", port=8080)` returns a
`ThreadingHTTPServer` that passes every request to the service. Call
`serve_forever()` on it to start serving.

## InfluxDB

`dewpointfan.influx.InfluxSender(config, state)`:

- `send()` writes nothing until both histories hold at least ten readings.
  Once they do, it POSTs a single line-protocol point to the
  `/api/v2/write` endpoint. It returns whether the write succeeded.
- `run(stop_event)` calls `send()` once a minute until the event is set.
- `create_point(now)` builds the line. It is a `dp` measurement with the
  fields `temp_i`, `temp_o`, `dewpoint_i`, `dewpoint_o`, `hum_i`, `hum_o`,
  `retry_i`, `retry_o` and `vent_val`.

```python
from dewpointfan.control import FanState
from dewpointfan.influx import InfluxSender
from dewpointfan.sensor import InfluxDbConfig

config = InfluxDbConfig(
    enabled=True,
    url="http://localhost:8086",
    token="token",
    org="home",
    bucket="ventilation",
)
sender = InfluxSender(config, FanState())
```

## What the package does not do

- It has no command-line program and reads no configuration file. Your own
  code builds the `FanState`, the `Controller`, the server and the sender,
  and starts them.
- It does not scan for BLE advertisements. Pass the manufacturer payloads
  from your own scanner to `process_advertisement`.
- It has no driver for a physical LCD or for GPIO pins. The only
  implementations it ships are `TerminalDisplay` and `DummyGpio`.

## Running the tests

Install the `test` extra and run `pytest` from the project directory.