"""
ERC-4337 UserOperation (EntryPoint v0.6 layout).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from eth_abi import encode

from ..utils import from_quantity, hex_to_bytes, keccak256, to_checksum_address, to_quantity

# address -> {"balance": ..., "nonce": ..., "code": ..., "state": ..., "stateDiff": ...}
OverrideSet = dict[str, dict[str, Any]]

_QUANTITY_FIELDS = (
    "nonce",
    "callGasLimit",
    "verificationGasLimit",
    "preVerificationGas",
    "maxFeePerGas",
    "maxPriorityFeePerGas",
)
_BYTES_FIELDS = ("initCode", "callData", "paymasterAndData", "signature")


@dataclass(frozen=True)
class UserOperation:
    sender: str
    nonce: int = 0
    init_code: bytes = b""
    call_data: bytes = b""
    call_gas_limit: int = 0
    verification_gas_limit: int = 0
    pre_verification_gas: int = 0
    max_fee_per_gas: int = 0
    max_priority_fee_per_gas: int = 0
    paymaster_and_data: bytes = b""
    signature: bytes = b""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserOperation":
        """Build from the camelCase JSON-RPC representation."""
        q = {name: from_quantity(data.get(name, 0)) for name in _QUANTITY_FIELDS}
        b = {name: hex_to_bytes(data.get(name) or "0x") for name in _BYTES_FIELDS}
        return cls(
            sender=to_checksum_address(data["sender"]),
            nonce=q["nonce"],
            init_code=b["initCode"],
            call_data=b["callData"],
            call_gas_limit=q["callGasLimit"],
            verification_gas_limit=q["verificationGasLimit"],
            pre_verification_gas=q["preVerificationGas"],
            max_fee_per_gas=q["maxFeePerGas"],
            max_priority_fee_per_gas=q["maxPriorityFeePerGas"],
            paymaster_and_data=b["paymasterAndData"],
            signature=b["signature"],
        )

    @classmethod
    def from_abi_tuple(cls, values: tuple) -> "UserOperation":
        return cls(to_checksum_address(values[0]), *values[1:])

    def to_dict(self) -> dict[str, str]:
        return {
            "sender": self.sender,
            "nonce": to_quantity(self.nonce),
            "initCode": "0x" + self.init_code.hex(),
            "callData": "0x" + self.call_data.hex(),
            "callGasLimit": to_quantity(self.call_gas_limit),
            "verificationGasLimit": to_quantity(self.verification_gas_limit),
            "preVerificationGas": to_quantity(self.pre_verification_gas),
            "maxFeePerGas": to_quantity(self.max_fee_per_gas),
            "maxPriorityFeePerGas": to_quantity(self.max_priority_fee_per_gas),
            "paymasterAndData": "0x" + self.paymaster_and_data.hex(),
            "signature": "0x" + self.signature.hex(),
        }

    def to_abi_tuple(self) -> tuple:
        return (
            to_checksum_address(self.sender),
            self.nonce,
            self.init_code,
            self.call_data,
            self.call_gas_limit,
            self.verification_gas_limit,
            self.pre_verification_gas,
            self.max_fee_per_gas,
            self.max_priority_fee_per_gas,
            self.paymaster_and_data,
            self.signature,
        )

    def pack(self) -> bytes:
        """Encoding hashed into the userOpHash (dynamic fields pre-hashed, no signature)."""
        return encode(
            [
                "address",
                "uint256",
                "bytes32",
                "bytes32",
                "uint256",
                "uint256",
                "uint256",
                "uint256",
                "uint256",
                "bytes32",
            ],
            [
                to_checksum_address(self.sender),
                self.nonce,
                keccak256(self.init_code),
                keccak256(self.call_data),
                self.call_gas_limit,
                self.verification_gas_limit,
                self.pre_verification_gas,
                self.max_fee_per_gas,
                self.max_priority_fee_per_gas,
                keccak256(self.paymaster_and_data),
            ],
        )

    def get_user_op_hash(self, entry_point: str, chain_id: int) -> str:
        encoded = encode(
            ["bytes32", "address", "uint256"],
            [keccak256(self.pack()), to_checksum_address(entry_point), chain_id],
        )
        return "0x" + keccak256(encoded).hex()
