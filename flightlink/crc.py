"""CRC-CCITT (polynomial 0x1021, initial value 0) used by the transponder link."""

from __future__ import annotations

from collections.abc import Iterable

CRC_POLYNOMIAL = 0x1021


def build_crc_table(polynomial: int = CRC_POLYNOMIAL) -> tuple[int, ...]:
    """Build the 256-entry lookup table for a 16-bit, MSB-first CRC."""
    table = []
    for index in range(256):
        crc = index << 8
        for _ in range(8):
            crc = (crc << 1) ^ (polynomial if crc & 0x8000 else 0)
        table.append(crc & 0xFFFF)
    return tuple(table)


_TABLE = build_crc_table()


def crc16(data: Iterable[int]) -> int:
    """Return the CRC-CCITT of ``data`` starting from zero."""
    crc = 0
    for byte in data:
        crc = (_TABLE[(crc >> 8) ^ byte] ^ (crc << 8)) & 0xFFFF
    return crc