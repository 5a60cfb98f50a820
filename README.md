# flightlink

Tools for the transponder data link of a small flight computer.

## Modules

### `flightlink.transponder`

Frames, unescapes and decodes messages from the transponder.

- `FrameReader.feed(data)` takes raw bytes and returns a list of the frames
  they complete. A frame starts and ends with the flag byte `0x7E`. Bytes
  received outside a frame are dropped. Bytes past `max_packet_size` (150 by
  default) inside a frame are dropped too.
- `unescape_payload(payload)` undoes byte stuffing. The escape byte `0x7D`
  means that the byte after it is XORed with `0x20`.
- `TransponderState.process_packet(frame)` checks the flag bytes of a whole
  frame and unescapes its body. It removes the two trailing CRC bytes and
  then decodes the rest. The CRC is not checked.
- `TransponderState.decode_packet(packet)` decodes an unescaped message body.
  It stores the result on the state and returns the kind of message:
  - `"Heartbeat"`
  - `"Ownship Report"`
  - `"Geometric Altitude"`
  - `"GNSS Data"`
  - `"Transponder Status"`
  - `"Barometer Sensor"`
  - `"Unknown"`
- The decoded values are kept in the state's `heartbeat`, `ownship`,
  `geometric_altitude`, `gnss`, `status` and `barometer` fields. These fields
  hold the dataclasses `HeartbeatMessage`, `OwnshipReport`,
  `GeometricAltitude`, `GNSSData`, `TransponderStatus` and `BarometerSensor`.
- Each message kind also has a function that decodes it on its own:
  - `parse_heartbeat`
  - `parse_ownship_report`
  - `parse_geometric_altitude`
  - `parse_gnss_data`
  - `parse_transponder_status`
  - `parse_barometer_sensor`
- `TransponderState.summary()` returns a one-line summary with these values:
  - flight ID
  - GNSS valid flag
  - latitude
  - longitude
  - barometric pressure

`PacketError`, a subclass of `ValueError`, is raised when:

- a frame lacks its flag bytes,
- a message body is shorter than 3 bytes,
- an escape byte ends the payload,
- a message is too short for its kind,
- a barometer message is not exactly 12 bytes.

### `flightlink.crc`

- `crc16(data)` computes the CRC-16/CCITT used by the transponder protocol:
  polynomial `0x1021`, initial value `0`, most significant bit first.
  `crc16(b"123456789")` is `0x31C3`.
- `build_crc_table(polynomial)` builds the 256-entry lookup table for any
  16-bit polynomial.

### `flightlink.logger`

`FlightLogger(directory, send=None)` writes samples to CSV files named
`LOG0.csv`, `LOG1.csv` and so on. It never overwrites an existing file.

- `start()` opens the next free file, writes the header row and turns logging
  on. The header row is:
  `Time,FlightID,GNSS Valid,Latitude,Longitude,Barometric Pressure`
- `log(state, now_ms)` handles one sample from a `TransponderState`:
  - It appends one row and flushes the file.
  - It passes the state's summary to `send`, if that was given.
  - It returns the summary, or `None` while logging is off.
- `stop()` turns logging off and closes the file.
- The logger is also a context manager.

## Installation

```
pip install flightlink
```

To run the tests:

```
pip install "flightlink[test]"
pytest
```

## Example

```python
from flightlink.logger import FlightLogger
from flightlink.transponder import FrameReader, TransponderState

state = TransponderState()
reader = FrameReader()

with FlightLogger("logs", send=print) as logger:
    for frame in reader.feed(incoming_bytes):
        kind = state.process_packet(frame)
        if kind == "Ownship Report":
            logger.log(state, now_ms=current_millis)
```

## What the package does not do

- It does not open serial ports or radios. Bytes are handed to
  `FrameReader.feed` by the caller. Outgoing summaries go to whatever callable
  is given as `send`.
- It does not verify the CRC of received frames. `crc16` is available for
  callers that want to check it.
- It has no support for the data records exchanged between the control board
  and the power board.
- It has no command-line program.

The package has no dependencies beyond the Python standard library. It
supports Python 3.10 and later.