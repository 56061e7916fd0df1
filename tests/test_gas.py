"""Tests for UserOperation gas estimation against a stub EntryPoint node."""

from __future__ import annotations

import pytest
from eth_abi import encode
from eth_hash.auto import keccak

from meerbridge.errors import GasEstimateError
from meerbridge.eth.client import EthClient
from meerbridge.eth.gas import EstimateInput, Overhead, estimate_gas
from meerbridge.eth.userop import UserOperation

ENTRY_POINT = "0x5FF137D4b0FDCD49DcA30c7CF57E578a026d2789"
URL = "http://meer.test/rpc"


def _revert(signature: str, types: list[str], values: list) -> dict:
    data = keccak(signature.encode())[:4] + encode(types, values)
    return {"error": {"code": 3, "message": "execution reverted", "data": "0x" + data.hex()}}


def _execution_result(pre_op_gas: int) -> dict:
    return _revert(
        "ExecutionResult(uint256,uint256,uint48,uint48,bool,bytes)",
        ["uint256", "uint256", "uint48", "uint48", "bool", "bytes"],
        [pre_op_gas, 0, 0, 0, True, b""],
    )


def _input(node, op: UserOperation, tracer: str = "", max_gas_limit: int = 10_000_000) -> EstimateInput:
    return EstimateInput(
        rpc=EthClient(URL, client=node.client()),
        entry_point=ENTRY_POINT,
        op=op,
        sos={op.sender: {"balance": "0xffffffff"}},
        ov=Overhead(),
        chain_id=813,
        max_gas_limit=max_gas_limit,
        tracer=tracer,
    )


@pytest.fixture()
def op() -> UserOperation:
    return UserOperation(
        sender="0x" + "11" * 20,
        nonce=3,
        call_data=b"\xb6\x1d\x27\xf6",
        pre_verification_gas=50_000,
    )


class TestEstimateGas:
    def test_verification_and_call_gas(self, node, op) -> None:
        node.replies["eth_call"] = _execution_result(110_000)
        node.replies["eth_estimateGas"] = {"result": hex(30_000)}

        assert estimate_gas(_input(node, op)) == (60_000, 30_000)

        call, block, overrides = node.params("eth_call")
        assert call["to"] == ENTRY_POINT
        assert overrides == {op.sender: {"balance": "0xffffffff"}}
        sender_call = node.params("eth_estimateGas")[0]
        assert sender_call["to"] == op.sender
        assert sender_call["data"] == "0xb61d27f6"

    def test_failed_op(self, node, op) -> None:
        node.replies["eth_call"] = _revert(
            "FailedOp(uint256,string)", ["uint256", "string"], [0, "AA21 didn't pay prefund"]
        )
        with pytest.raises(GasEstimateError, match="AA21"):
            estimate_gas(_input(node, op))
        assert "eth_estimateGas" not in node.methods

    def test_revert_without_data(self, node, op) -> None:
        node.replies["eth_call"] = {"error": {"code": -32000, "message": "out of gas"}}
        with pytest.raises(GasEstimateError, match="out of gas"):
            estimate_gas(_input(node, op))

    def test_simulation_must_revert(self, node, op) -> None:
        node.replies["eth_call"] = {"result": "0x"}
        with pytest.raises(GasEstimateError):
            estimate_gas(_input(node, op))

    def test_tracer_used_for_call_gas(self, node, op) -> None:
        node.replies["eth_call"] = _execution_result(90_000)
        node.replies["debug_traceCall"] = {"result": {"gasUsed": hex(21_500)}}

        assert estimate_gas(_input(node, op, tracer="callTracer")) == (40_000, 21_500)

        _call, _block, config = node.params("debug_traceCall")
        assert config["tracer"] == "callTracer"
        assert "eth_estimateGas" not in node.methods

    def test_capped_at_max_gas_limit(self, node, op) -> None:
        node.replies["eth_call"] = _execution_result(5_000_000)
        node.replies["eth_estimateGas"] = {"result": hex(3_000_000)}
        assert estimate_gas(_input(node, op, max_gas_limit=1_000_000)) == (1_000_000, 1_000_000)

    def test_missing_pre_verification_gas_is_computed(self, node) -> None:
        bare = UserOperation(sender="0x" + "11" * 20, call_data=b"\x00\x01")
        pvg = Overhead().calc_pre_verification_gas(bare)
        node.replies["eth_call"] = _execution_result(pvg + 1234)
        node.replies["eth_estimateGas"] = {"result": "0x5208"}

        assert estimate_gas(_input(node, bare)) == (1234, 21_000)


class TestOverhead:
    def test_pre_verification_gas_covers_fixed_costs(self) -> None:
        ov = Overhead()
        op = UserOperation(sender="0x" + "11" * 20)
        assert ov.calc_pre_verification_gas(op) > ov.fixed + ov.per_user_op

    def test_longer_calldata_costs_more(self) -> None:
        ov = Overhead()
        short = UserOperation(sender="0x" + "11" * 20, call_data=b"\x01")
        long = UserOperation(sender="0x" + "11" * 20, call_data=b"\x01" * 100)
        assert ov.calc_pre_verification_gas(long) > ov.calc_pre_verification_gas(short)
