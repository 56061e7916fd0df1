"""
UserOperation lookups by scanning EntryPoint ``UserOperationEvent`` logs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..utils import bytes_to_hash32, from_quantity, hex_to_bytes, to_checksum_address
from .abi import decode_event_data, decode_function_input, entry_point_abi, event_topic
from .client import EthClient
from .userop import UserOperation


@dataclass(frozen=True)
class UserOperationReceipt:
    user_op_hash: str
    sender: str
    paymaster: str
    nonce: int
    success: bool
    actual_gas_cost: int
    actual_gas_used: int
    entry_point: str
    receipt: dict[str, Any]
    logs: list[dict[str, Any]] = field(default_factory=list)
    reason: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "userOpHash": self.user_op_hash,
            "sender": self.sender,
            "paymaster": self.paymaster,
            "nonce": hex(self.nonce),
            "success": self.success,
            "actualGasCost": hex(self.actual_gas_cost),
            "actualGasUsed": hex(self.actual_gas_used),
            "entryPoint": self.entry_point,
            "reason": self.reason,
            "logs": self.logs,
            "receipt": self.receipt,
        }


@dataclass(frozen=True)
class HashLookupResult:
    user_operation: UserOperation
    entry_point: str
    block_number: int
    block_hash: str
    transaction_hash: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "userOperation": self.user_operation.to_dict(),
            "entryPoint": self.entry_point,
            "blockNumber": hex(self.block_number),
            "blockHash": self.block_hash,
            "transactionHash": self.transaction_hash,
        }


def _normalize_hash(user_op_hash: str) -> str:
    return "0x" + bytes_to_hash32(hex_to_bytes(user_op_hash)).hex()


def _topic_address(topic: str) -> str:
    return to_checksum_address(topic[-40:])


def _find_user_op_event(
    eth: EthClient, user_op_hash: str, ep: str, blk_range: int
) -> Optional[dict[str, Any]]:
    topic = event_topic(entry_point_abi(), "UserOperationEvent")
    latest = eth.block_number()
    from_block = latest - blk_range if latest > blk_range else 0
    logs = eth.get_logs(ep, [topic, user_op_hash], from_block)
    return logs[0] if logs else None


def _slice_op_logs(receipt_logs: list[dict], event: dict, ep: str, topic: str) -> list[dict]:
    """Logs emitted between the previous UserOperationEvent and this one."""
    start = 0
    for i, log in enumerate(receipt_logs):
        if log.get("logIndex") == event.get("logIndex"):
            return receipt_logs[start:i]
        topics = log.get("topics") or []
        if str(log.get("address", "")).lower() == ep.lower() and topics and topics[0] == topic:
            start = i + 1
    return []


def get_user_operation_receipt(
    eth: EthClient, user_op_hash: str, ep: str, blk_range: int
) -> Optional[UserOperationReceipt]:
    """
    Look up the receipt of a bundled UserOperation.

    Returns:
        The receipt, or None if no matching event exists in the last
        ``blk_range`` blocks
    """
    user_op_hash = _normalize_hash(user_op_hash)
    event = _find_user_op_event(eth, user_op_hash, ep, blk_range)
    if event is None:
        return None
    receipt = eth.get_transaction_receipt(event["transactionHash"])
    if receipt is None:
        return None

    abi = entry_point_abi()
    topic = event_topic(abi, "UserOperationEvent")
    nonce, success, cost, used = decode_event_data(abi, "UserOperationEvent", event["data"])
    op_logs = _slice_op_logs(receipt.get("logs") or [], event, ep, topic)

    reason = ""
    revert_topic = event_topic(abi, "UserOperationRevertReason")
    for log in op_logs:
        topics = log.get("topics") or []
        if len(topics) > 1 and topics[0] == revert_topic and topics[1] == user_op_hash:
            _, revert_reason = decode_event_data(abi, "UserOperationRevertReason", log["data"])
            reason = "0x" + revert_reason.hex()
            break

    return UserOperationReceipt(
        user_op_hash=user_op_hash,
        sender=_topic_address(event["topics"][2]),
        paymaster=_topic_address(event["topics"][3]),
        nonce=nonce,
        success=success,
        actual_gas_cost=cost,
        actual_gas_used=used,
        entry_point=to_checksum_address(ep),
        receipt=receipt,
        logs=op_logs,
        reason=reason,
    )


def get_user_operation_by_hash(
    eth: EthClient, user_op_hash: str, ep: str, chain_id: int, blk_range: int
) -> Optional[HashLookupResult]:
    """
    Recover a bundled UserOperation from its ``handleOps`` transaction.

    Returns:
        The lookup result, or None if the op is not found or was not
        submitted through a direct ``handleOps`` call
    """
    user_op_hash = _normalize_hash(user_op_hash)
    event = _find_user_op_event(eth, user_op_hash, ep, blk_range)
    if event is None:
        return None
    tx = eth.get_transaction_by_hash(event["transactionHash"])
    if tx is None:
        return None

    try:
        ops, _beneficiary = decode_function_input(entry_point_abi(), "handleOps", tx["input"])
    except ValueError:
        return None

    for values in ops:
        op = UserOperation.from_abi_tuple(values)
        if op.get_user_op_hash(ep, chain_id) == user_op_hash:
            return HashLookupResult(
                user_operation=op,
                entry_point=to_checksum_address(ep),
                block_number=from_quantity(tx.get("blockNumber")),
                block_hash=tx.get("blockHash") or "",
                transaction_hash=event["transactionHash"],
            )
    return None
