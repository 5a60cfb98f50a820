"""Framing, unescaping and decoding of messages from the ping transponder."""

from __future__ import annotations

import struct
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

FLAG_BYTE = 0x7E
ESCAPE_BYTE = 0x7D
MAX_PACKET_SIZE = 150


class PacketError(ValueError):
    """Raised when a frame or message cannot be decoded."""


def _f32(value: float) -> float:
    """Round a value to single precision."""
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _sign24(raw: int) -> int:
    return raw - (1 << 24) if raw & 0x800000 else raw


def _wrap16(value: int) -> int:
    return ((value + 0x8000) & 0xFFFF) - 0x8000


def _require(data: bytes, size: int, what: str) -> None:
    if len(data) < size:
        raise PacketError(f"{what} needs at least {size} bytes, got {len(data)}")


def unescape_payload(payload: Iterable[int]) -> bytes:
    """Undo byte stuffing: an escape byte means the next byte is XORed with 0x20."""
    out = bytearray()
    stream = iter(payload)
    for byte in stream:
        if byte == ESCAPE_BYTE:
            try:
                byte = next(stream) ^ 0x20
            except StopIteration:
                raise PacketError("escape byte at end of payload") from None
        out.append(byte)
    return bytes(out)


@dataclass
class HeartbeatMessage:
    gnss_valid: int = 0
    maintenance_req: int = 0
    ident_active: int = 0
    initialized: int = 0


@dataclass
class OwnshipReport:
    message_id: int = 0
    traffic_alert_status: int = 0
    latitude: float = 0.0
    longitude: float = 0.0
    altitude: int = 0
    miscellaneous_indicators: int = 0
    nic: int = 0
    nacp: int = 0
    horizontal_velocity: int = 0
    vertical_velocity: int = 0
    track_heading: int = 0
    emitter_category: int = 0
    flight_identification: str = ""


@dataclass
class GeometricAltitude:
    message_id: int = 0
    geometric_altitude: int = 0


@dataclass
class GNSSData:
    message_id: int = 0
    message_version: int = 0
    utc_time: int = 0
    latitude: float = 0.0
    longitude: float = 0.0
    altitude: float = 0.0
    hpl: float = 0.0
    vpl: float = 0.0
    hfom: float = 0.0
    vfom: float = 0.0
    hvfom: float = 0.0
    vvfom: float = 0.0
    gnss_vertical_speed: float = 0.0
    north_south_velocity: float = 0.0
    east_west_velocity: float = 0.0


@dataclass
class TransponderStatus:
    message_id: int = 0
    message_version: int = 0
    tx_enabled: bool = False
    ident_button_active: bool = False


@dataclass
class BarometerSensor:
    message_id: int = 0
    sensor_type: int = 0
    barometric_pressure: float = 0.0
    barometric_pressure_altitude: int = 0
    barometric_sensor_temperature: float = 0.0


def parse_heartbeat(data: bytes) -> HeartbeatMessage:
    """Decode the status flags of a heartbeat message."""
    _require(data, 3, "heartbeat")
    flags = data[2]
    return HeartbeatMessage(
        gnss_valid=(flags >> 7) & 0x01,
        maintenance_req=(flags >> 6) & 0x01,
        ident_active=(flags >> 5) & 0x01,
        initialized=flags & 0x01,
    )


def parse_ownship_report(data: bytes) -> OwnshipReport:
    """Decode an ownship report."""
    _require(data, 25, "ownship report")
    scale = _f32(180.0 / (1 << 23))
    latitude_raw = _sign24(int.from_bytes(data[5:8], "big"))
    longitude_raw = _sign24(int.from_bytes(data[8:11], "big"))
    ident = bytes(data[19:25]).split(b"\0", 1)[0].decode("latin-1")
    return OwnshipReport(
        message_id=data[0],
        traffic_alert_status=(data[1] & 0xF0) >> 4,
        latitude=_f32(latitude_raw * scale),
        longitude=_f32(longitude_raw * scale),
        altitude=(((data[11] << 8) | data[12]) >> 4) * 25 - 1000,
        miscellaneous_indicators=data[12] & 0x0F,
        nic=(data[13] & 0xF0) >> 4,
        nacp=data[13] & 0x0F,
        horizontal_velocity=(data[14] << 4) | (data[15] >> 4),
        vertical_velocity=((data[15] & 0x0F) << 8) | data[16],
        track_heading=data[17],
        emitter_category=data[18],
        flight_identification=ident,
    )


def parse_geometric_altitude(data: bytes) -> GeometricAltitude:
    """Decode a geometric altitude message (5 ft units, kept as 16-bit)."""
    _require(data, 3, "geometric altitude")
    (raw,) = struct.unpack_from(">h", data, 1)
    return GeometricAltitude(message_id=data[0], geometric_altitude=_wrap16(raw * 5))


_GNSS_LAYOUT = struct.Struct(">BBIiiiiiiHHHhhh")


def parse_gnss_data(data: bytes) -> GNSSData:
    """Decode a GNSS data message."""
    _require(data, _GNSS_LAYOUT.size, "GNSS data")
    (msg_id, version, utc, lat, lon, alt, hpl, vpl, hfom,
     vfom, hvfom, vvfom, vspeed, ns, ew) = _GNSS_LAYOUT.unpack_from(data)
    return GNSSData(
        message_id=msg_id,
        message_version=version,
        utc_time=utc,
        latitude=lat / 1e7,
        longitude=lon / 1e7,
        altitude=alt / 1e3,
        hpl=hpl / 1e3,
        vpl=vpl / 1e2,
        hfom=hfom / 1e3,
        vfom=vfom / 1e2,
        hvfom=hvfom / 1e3,
        vvfom=vvfom / 1e3,
        gnss_vertical_speed=vspeed / 1e2,
        north_south_velocity=ns / 1e1,
        east_west_velocity=ew / 1e1,
    )


def parse_transponder_status(data: bytes) -> TransponderStatus:
    """Decode a transponder status message."""
    _require(data, 3, "transponder status")
    return TransponderStatus(
        message_id=data[0],
        message_version=data[1],
        tx_enabled=bool(data[2] & 0x80),
        ident_button_active=bool(data[2] & 0x08),
    )


_BAROMETER_LAYOUT = struct.Struct(">BBIih")


def parse_barometer_sensor(data: bytes) -> BarometerSensor:
    """Decode a barometer sensor message; it must be exactly 12 bytes."""
    if len(data) != _BAROMETER_LAYOUT.size:
        raise PacketError(
            "Invalid data length for Barometer Sensor message. Expected 12 bytes."
        )
    msg_id, sensor_type, pressure, altitude, temperature = _BAROMETER_LAYOUT.unpack(
        bytes(data)
    )
    return BarometerSensor(
        message_id=msg_id,
        sensor_type=sensor_type,
        barometric_pressure=_f32(pressure / 100.0),
        barometric_pressure_altitude=altitude,
        barometric_sensor_temperature=_f32(temperature / 100.0),
    )


_DECODERS: dict[int, tuple[str, str, Callable[[bytes], Any]]] = {
    0x00: ("Heartbeat", "heartbeat", parse_heartbeat),
    0x0A: ("Ownship Report", "ownship", parse_ownship_report),
    0x0B: ("Geometric Altitude", "geometric_altitude", parse_geometric_altitude),
    0x2E: ("GNSS Data", "gnss", parse_gnss_data),
    0x2F: ("Transponder Status", "status", parse_transponder_status),
    0x28: ("Barometer Sensor", "barometer", parse_barometer_sensor),
}


@dataclass
class TransponderState:
    """Most recent message of each kind received from the transponder."""

    heartbeat: HeartbeatMessage = field(default_factory=HeartbeatMessage)
    ownship: OwnshipReport = field(default_factory=OwnshipReport)
    geometric_altitude: GeometricAltitude = field(default_factory=GeometricAltitude)
    gnss: GNSSData = field(default_factory=GNSSData)
    status: TransponderStatus = field(default_factory=TransponderStatus)
    barometer: BarometerSensor = field(default_factory=BarometerSensor)

    def decode_packet(self, packet: bytes) -> str:
        """Decode an unescaped message body, store it and return its kind."""
        packet = bytes(packet)
        if len(packet) < 3:
            raise PacketError("Invalid packet length")
        entry = _DECODERS.get(packet[0])
        if entry is None:
            return "Unknown"
        name, attribute, parser = entry
        setattr(self, attribute, parser(packet))
        return name

    def process_packet(self, frame: bytes) -> str:
        """Decode a whole flag-delimited frame, dropping its two CRC bytes."""
        frame = bytes(frame)
        if len(frame) < 2 or frame[0] != FLAG_BYTE or frame[-1] != FLAG_BYTE:
            raise PacketError("Invalid frame flags")
        unescaped = unescape_payload(frame[1:-1])
        return self.decode_packet(unescaped[:-2])

    def summary(self) -> str:
        """One-line summary of the flight data of interest."""
        return (
            f"Flight ID: {self.ownship.flight_identification}, "
            f"GNSS Valid: {self.heartbeat.gnss_valid}, "
            f"Latitude: {self.ownship.latitude:.6f}, "
            f"Longitude: {self.ownship.longitude:.6f}, "
            f"Barometric Pressure: {self.barometer.barometric_pressure:.6f}"
        )


class FrameReader:
    """Splits a raw byte stream into flag-delimited frames."""

    def __init__(self, max_packet_size: int = MAX_PACKET_SIZE) -> None:
        self.max_packet_size = max_packet_size
        self._buffer = bytearray()
        self._capturing = False

    @property
    def capturing(self) -> bool:
        return self._capturing

    def feed(self, data: Iterable[int]) -> list[bytes]:
        """Consume bytes and return every frame completed by them."""
        frames = []
        for byte in data:
            if byte == FLAG_BYTE:
                if self._capturing:
                    self._buffer.append(FLAG_BYTE)
                    frames.append(bytes(self._buffer))
                    self._buffer.clear()
                    self._capturing = False
                else:
                    self._capturing = True
                    self._buffer = bytearray([FLAG_BYTE])
            elif self._capturing and len(self._buffer) < self.max_packet_size:
                self._buffer.append(byte)
        return frames