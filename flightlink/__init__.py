"""Transponder frame decoding, CRC-16/CCITT and CSV flight logging."""

__version__ = "0.1.0"
__all__ = ["crc", "transponder", "logger"]