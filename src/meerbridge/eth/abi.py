"""
ABI Loader - Loads contract ABIs shipped with the package.

Artifacts live in meerbridge/contracts/*.json using the Foundry output layout
({"abi": [...]}), so they can be refreshed straight from a ``forge build``.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from eth_abi import decode, encode

from ..utils import hex_to_bytes, keccak256

CONTRACTS_DIR = Path(__file__).resolve().parent.parent / "contracts"


@lru_cache(maxsize=16)
def load_abi(contract_name: str) -> list[dict[str, Any]]:
    """
    Load ABI for a packaged contract.

    Args:
        contract_name: Contract name (e.g., "MeerChange", "EntryPoint")

    Returns:
        ABI as a list of dicts

    Raises:
        FileNotFoundError: If ABI file not found
    """
    abi_path = CONTRACTS_DIR / f"{contract_name}.json"
    if not abi_path.exists():
        raise FileNotFoundError(f"ABI not found: {abi_path}")

    with abi_path.open("r", encoding="utf-8") as f:
        artifact = json.load(f)

    return artifact["abi"]


def _find_entry(abi: list, name: str, kind: str) -> dict[str, Any]:
    for entry in abi:
        if entry.get("type") == kind and entry.get("name") == name:
            return entry
    raise ValueError(f"{kind.capitalize()} {name} not found in ABI")


def _abi_type(param: dict[str, Any]) -> str:
    """Canonical type string, expanding tuples ("tuple[]" -> "(a,b)[]")."""
    typ = param["type"]
    if typ.startswith("tuple"):
        inner = ",".join(_abi_type(c) for c in param.get("components", []))
        return f"({inner}){typ[len('tuple'):]}"
    return typ


def signature(entry: dict[str, Any]) -> str:
    types = ",".join(_abi_type(p) for p in entry.get("inputs", []))
    return f"{entry['name']}({types})"


def selector(abi: list, function_name: str) -> bytes:
    return keccak256(signature(_find_entry(abi, function_name, "function")).encode("utf-8"))[:4]


def event_topic(abi: list, event_name: str) -> str:
    return "0x" + keccak256(signature(_find_entry(abi, event_name, "event")).encode("utf-8")).hex()


def error_selector(abi: list, error_name: str) -> bytes:
    return keccak256(signature(_find_entry(abi, error_name, "error")).encode("utf-8"))[:4]


def encode_function_call(abi: list, function_name: str, args: list) -> str:
    """
    ABI-encode a function call.

    Returns:
        0x-prefixed hex encoded calldata
    """
    func = _find_entry(abi, function_name, "function")
    input_types = [_abi_type(inp) for inp in func.get("inputs", [])]
    encoded_args = encode(input_types, args) if args else b""
    return "0x" + selector(abi, function_name).hex() + encoded_args.hex()


def decode_function_input(abi: list, function_name: str, data: str) -> tuple:
    """Decode calldata (selector included) for ``function_name``."""
    func = _find_entry(abi, function_name, "function")
    raw = hex_to_bytes(data)
    if raw[:4] != selector(abi, function_name):
        raise ValueError(f"Calldata is not a {function_name} call")
    input_types = [_abi_type(inp) for inp in func.get("inputs", [])]
    return decode(input_types, raw[4:])


def decode_error(abi: list, error_name: str, data: str) -> tuple | None:
    """Decode revert data as ``error_name``; None if the selector differs."""
    raw = hex_to_bytes(data)
    if raw[:4] != error_selector(abi, error_name):
        return None
    entry = _find_entry(abi, error_name, "error")
    return decode([_abi_type(p) for p in entry.get("inputs", [])], raw[4:])


def decode_event_data(abi: list, event_name: str, data: str) -> tuple:
    """Decode the non-indexed fields of an event log."""
    entry = _find_entry(abi, event_name, "event")
    types = [_abi_type(p) for p in entry.get("inputs", []) if not p.get("indexed")]
    return decode(types, hex_to_bytes(data))


def meerchange_abi() -> list[dict[str, Any]]:
    """Load MeerChange ABI."""
    return load_abi("MeerChange")


def entry_point_abi() -> list[dict[str, Any]]:
    """Load EntryPoint (v0.6) ABI."""
    return load_abi("EntryPoint")
