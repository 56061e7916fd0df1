from __future__ import annotations

import re
from typing import Any

from eth_hash.auto import keccak

from .errors import EncodingError

# NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.


def keccak256(data: bytes) -> bytes:
    return keccak(data)


def strip_0x(value: str) -> str:
    return value[2:] if value[:2] in ("0x", "0X") else value


def hex_to_bytes(value: str) -> bytes:
    """Decode hex text with an optional 0x prefix."""
    try:
        text = strip_0x(value)
        # bytes.fromhex skips whitespace
        if re.search(r"\s", text):
            raise ValueError("whitespace in hex string")
        return bytes.fromhex(text)
    except (TypeError, ValueError) as exc:
        raise EncodingError(f"Invalid hex string: {value!r}") from exc


def bytes_to_hash32(data: bytes) -> bytes:
    """Left-pad (or crop from the left) to exactly 32 bytes."""
    if len(data) > 32:
        return data[-32:]
    return data.rjust(32, b"\x00")


def to_quantity(value: int) -> str:
    return hex(value)


def from_quantity(value: Any) -> int:
    if isinstance(value, int):
        return value
    if value is None:
        return 0
    return int(value, 16) if str(value).startswith(("0x", "0X")) else int(value)


def to_checksum_address(address: str) -> str:
    """Convert an address to EIP-55 checksummed format."""
    addr = strip_0x(address).lower()
    addr_hash = keccak256(addr.encode("utf-8")).hex()
    result = "0x"
    for i, c in enumerate(addr):
        if c in "abcdef":
            result += c.upper() if int(addr_hash[i], 16) >= 8 else c
        else:
            result += c
    return result


def check_uint(value: int, bits: int, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value < (1 << bits):
        raise EncodingError(f"{name} must be a uint{bits}, got {value!r}")
    return value
