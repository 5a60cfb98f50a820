import pytest

from flightlink.crc import CRC_POLYNOMIAL, build_crc_table, crc16


def test_table_has_256_entries_starting_with_zero_and_polynomial():
    table = build_crc_table()
    assert len(table) == 256
    assert table[0] == 0
    assert table[1] == CRC_POLYNOMIAL


def test_table_for_other_polynomial_uses_it():
    table = build_crc_table(0x8005)
    assert table[1] == 0x8005
    assert all(0 <= entry <= 0xFFFF for entry in table)


def test_check_value():
    assert crc16(b"123456789") == 0x31C3


def test_empty_input_gives_zero():
    assert crc16(b"") == 0


@pytest.mark.parametrize("value", [0, 1, 0x7E, 0x80, 0xFF])
def test_single_byte_matches_table(value):
    assert crc16(bytes([value])) == build_crc_table()[value]


@pytest.mark.parametrize("data", [b"\x00", b"hello", bytes(range(40)), b"\x7e\x7d\x00\x0a"])
def test_appending_crc_gives_zero_residue(data):
    crc = crc16(data)
    assert crc16(data + crc.to_bytes(2, "big")) == 0


def test_crc_is_linear_over_xor():
    first = b"\x12\x34\x56\x78\x9a"
    second = b"\xff\x00\x0f\xf0\x55"
    combined = bytes(a ^ b for a, b in zip(first, second))
    assert crc16(combined) == crc16(first) ^ crc16(second)


def test_accepts_list_of_ints():
    assert crc16([0x31, 0x32, 0x33]) == crc16(b"123")