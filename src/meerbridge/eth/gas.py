"""
UserOperation gas estimation against an EntryPoint v0.6.

verificationGas comes from the ``ExecutionResult`` revert of
``simulateHandleOp`` (preOpGas - preVerificationGas); callGas from
``eth_estimateGas`` of the sender call, or from ``debug_traceCall`` when a
tracer is configured.  Both are capped at ``max_gas_limit``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Optional

from eth_abi import encode

from ..errors import GasEstimateError, RpcError
from ..utils import from_quantity, to_checksum_address, to_quantity
from .abi import decode_error, encode_function_call, entry_point_abi
from .client import EthClient
from .userop import OverrideSet, UserOperation

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

_USER_OP_TUPLE = (
    "(address,uint256,bytes,bytes,uint256,uint256,uint256,uint256,uint256,bytes,bytes)"
)


@dataclass(frozen=True)
class Overhead:
    fixed: int = 21000
    per_user_op: int = 18300
    per_user_op_word: int = 4
    zero_byte: int = 4
    non_zero_byte: int = 16
    min_bundle_size: int = 1
    sig_size: int = 65

    def calc_pre_verification_gas(self, op: UserOperation) -> int:
        """Calldata cost of ``op`` inside a bundle plus the per-op overhead."""
        if len(op.signature) < self.sig_size:
            op = replace(op, signature=b"\x01" * self.sig_size)
        packed = encode([_USER_OP_TUPLE], [op.to_abi_tuple()])[32:]
        call_data_cost = sum(self.zero_byte if b == 0 else self.non_zero_byte for b in packed)
        words = (len(packed) + 31) // 32
        return (
            call_data_cost
            + self.fixed // self.min_bundle_size
            + self.per_user_op
            + self.per_user_op_word * words
        )


@dataclass(frozen=True)
class EstimateInput:
    rpc: EthClient
    entry_point: str
    op: UserOperation
    sos: Optional[OverrideSet]
    ov: Overhead
    chain_id: int
    max_gas_limit: int
    tracer: str = ""


def _revert_data(exc: RpcError) -> str:
    data = exc.data
    if isinstance(data, dict):
        data = data.get("data")
    if not isinstance(data, str) or not data.startswith("0x"):
        raise GasEstimateError(f"simulateHandleOp failed without revert data: {exc.message}") from exc
    return data


def _simulate_pre_op_gas(inp: EstimateInput, op: UserOperation) -> int:
    abi = entry_point_abi()
    calldata = encode_function_call(abi, "simulateHandleOp", [op.to_abi_tuple(), ZERO_ADDRESS, b""])
    tx = {
        "from": ZERO_ADDRESS,
        "to": to_checksum_address(inp.entry_point),
        "data": calldata,
        "gas": to_quantity(inp.max_gas_limit),
    }
    try:
        inp.rpc.call(tx, "latest", inp.sos)
    except RpcError as exc:
        revert = _revert_data(exc)
    else:
        raise GasEstimateError("simulateHandleOp returned without ExecutionResult")

    failed = decode_error(abi, "FailedOp", revert)
    if failed is not None:
        raise GasEstimateError(f"FailedOp({failed[0]}): {failed[1]}")
    result = decode_error(abi, "ExecutionResult", revert)
    if result is None:
        raise GasEstimateError(f"Unexpected simulateHandleOp revert: {revert[:10]}")
    return result[0]


def _estimate_call_gas(inp: EstimateInput, op: UserOperation) -> int:
    call: dict[str, Any] = {
        "from": to_checksum_address(inp.entry_point),
        "to": op.sender,
        "data": "0x" + op.call_data.hex(),
    }
    if inp.tracer:
        trace_config: dict[str, Any] = {"tracer": inp.tracer}
        if inp.sos:
            trace_config["stateOverrides"] = inp.sos
        trace = inp.rpc.request("debug_traceCall", [call, "latest", trace_config])
        return from_quantity((trace or {}).get("gasUsed"))
    return inp.rpc.estimate_gas(call, "latest", inp.sos)


def estimate_gas(inp: EstimateInput) -> tuple[int, int]:
    """
    Estimate (verificationGas, callGas) for ``inp.op``.

    Raises:
        GasEstimateError: The EntryPoint rejected the op or gave no result
        RpcError, TransportError: Propagated from the node
    """
    op = inp.op
    if op.pre_verification_gas == 0:
        op = replace(op, pre_verification_gas=inp.ov.calc_pre_verification_gas(op))
    logger.debug("Estimating gas for userOp %s", op.get_user_op_hash(inp.entry_point, inp.chain_id))

    sim_op = replace(
        op,
        verification_gas_limit=inp.max_gas_limit,
        call_gas_limit=0,
        max_fee_per_gas=0,
        max_priority_fee_per_gas=0,
    )
    pre_op_gas = _simulate_pre_op_gas(inp, sim_op)
    verification_gas = max(pre_op_gas - op.pre_verification_gas, 0)
    call_gas = _estimate_call_gas(inp, op)

    return min(verification_gas, inp.max_gas_limit), min(call_gas, inp.max_gas_limit)
