"""Unit tests for the JSON-RPC envelope codec."""

from __future__ import annotations

import pytest

from meerbridge.errors import ProtocolError, RpcError
from meerbridge.qng.envelope import JsonRpcRequest, JsonRpcResponse


class TestRequest:
    def test_defaults(self) -> None:
        req = JsonRpcRequest("qng_getBalance", ["0xABC", 1])
        assert req.to_dict() == {
            "method": "qng_getBalance",
            "params": ["0xABC", 1],
            "id": 1,
            "jsonrpc": "2.0",
        }

    def test_empty_params(self) -> None:
        assert JsonRpcRequest("qng_addBalance").to_dict()["params"] == []


class TestResponse:
    def test_result_returned_verbatim(self) -> None:
        payload = {"id": 1, "jsonrpc": "2.0", "result": {"utxos": [1, 2]}}
        assert JsonRpcResponse.from_dict(payload).unwrap() == {"utxos": [1, 2]}

    @pytest.mark.parametrize("value", [0, False, "", []])
    def test_falsy_result_is_a_result(self, value) -> None:
        assert JsonRpcResponse.from_dict({"id": 1, "result": value}).unwrap() == value

    def test_error_code_raises_rpc_error(self) -> None:
        resp = JsonRpcResponse.from_dict(
            {"id": 1, "jsonrpc": "2.0", "error": {"code": 1, "message": "bad address"}}
        )
        with pytest.raises(RpcError) as exc_info:
            resp.unwrap()
        assert str(exc_info.value) == "bad address"
        assert exc_info.value.code == 1

    def test_error_wins_over_result(self) -> None:
        resp = JsonRpcResponse.from_dict(
            {"id": 1, "result": "1000", "error": {"code": -32000, "message": "boom"}}
        )
        with pytest.raises(RpcError, match="boom"):
            resp.unwrap()

    def test_no_result_no_error_is_protocol_error(self) -> None:
        with pytest.raises(ProtocolError, match="network request exception"):
            JsonRpcResponse.from_dict({"id": 1, "jsonrpc": "2.0"}).unwrap()

    def test_zero_code_error_without_result(self) -> None:
        resp = JsonRpcResponse.from_dict({"id": 1, "error": {"code": 0, "message": ""}, "result": None})
        with pytest.raises(ProtocolError):
            resp.unwrap()

    def test_null_allowed_when_requested(self) -> None:
        assert JsonRpcResponse.from_dict({"id": 1, "result": None}).unwrap(allow_null=True) is None

    def test_message_member_kept(self) -> None:
        resp = JsonRpcResponse.from_dict({"id": 1, "message": "ok", "result": 1})
        assert resp.message == "ok"

    @pytest.mark.parametrize("payload", [[], "oops", None])
    def test_non_object_payload(self, payload) -> None:
        with pytest.raises(ProtocolError):
            JsonRpcResponse.from_dict(payload)

    def test_malformed_error_member(self) -> None:
        with pytest.raises(ProtocolError):
            JsonRpcResponse.from_dict({"id": 1, "error": "bad"})
