"""Stable colours derived from block and item names."""

from __future__ import annotations

_MASK = 0xFFFFFFFFFFFFFFFF


def _rotl(value: int, shift: int) -> int:
    return ((value << shift) | (value >> (64 - shift))) & _MASK


def _sip_round(v0: int, v1: int, v2: int, v3: int) -> tuple[int, int, int, int]:
    v0 = (v0 + v1) & _MASK
    v1 = _rotl(v1, 13) ^ v0
    v0 = _rotl(v0, 32)
    v2 = (v2 + v3) & _MASK
    v3 = _rotl(v3, 16) ^ v2
    v0 = (v0 + v3) & _MASK
    v3 = _rotl(v3, 21) ^ v0
    v2 = (v2 + v1) & _MASK
    v1 = _rotl(v1, 17) ^ v2
    v2 = _rotl(v2, 32)
    return v0, v1, v2, v3


def siphash13(data: bytes, k0: int = 0, k1: int = 0) -> int:
    """SipHash-1-3 of data with the 64-bit keys k0 and k1."""
    v0 = k0 ^ 0x736F6D6570736575
    v1 = k1 ^ 0x646F72616E646F6D
    v2 = k0 ^ 0x6C7967656E657261
    v3 = k1 ^ 0x7465646279746573

    full = len(data) - len(data) % 8
    for offset in range(0, full, 8):
        m = int.from_bytes(data[offset : offset + 8], "little")
        v3 ^= m
        v0, v1, v2, v3 = _sip_round(v0, v1, v2, v3)
        v0 ^= m

    last = ((len(data) & 0xFF) << 56) | int.from_bytes(data[full:], "little")
    v3 ^= last
    v0, v1, v2, v3 = _sip_round(v0, v1, v2, v3)
    v0 ^= last

    v2 ^= 0xFF
    for _ in range(3):
        v0, v1, v2, v3 = _sip_round(v0, v1, v2, v3)
    return v0 ^ v1 ^ v2 ^ v3


def string_to_color(string: str) -> tuple[int, int, int, int]:
    """Four colour bytes taken from the string's hash."""
    # A string hashes as its UTF-8 bytes followed by a 0xFF terminator.
    digest = siphash13(string.encode("utf-8") + b"\xff").to_bytes(8, "big")
    return digest[1], digest[2], digest[6], digest[7]


def string_to_color_hex_code(string: str) -> str:
    """An "#RRGGBB" style code from a simple rolling hash of the string."""
    value = 0
    for char in string:
        code = int.from_bytes(char.encode("utf-8").ljust(4, b"\0"), "big")
        value = (code + ((value << 5) - value)) & 0xFFFFFFFF
    return "#" + "".join(f"{(value >> (i * 8)) & 0xFF:02X}" for i in range(3))