"""
JSON-RPC 2.0 envelope shapes used on the qng chain (and the EVM node).

Request:  {"method": "<name>", "params": [...], "id": 1, "jsonrpc": "2.0"}
Response: {"id": 1, "jsonrpc": "2.0", "result": <any>}
      or  {"id": 1, "jsonrpc": "2.0", "error": {"code": <int>, "message": "<string>"}}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..errors import ProtocolError, RpcError

JSONRPC_VERSION = "2.0"

# Calls are never pipelined, so a fixed id is enough to pair request and response.
DEFAULT_REQUEST_ID = 1

EMPTY_RESULT_MESSAGE = "network request exception"


@dataclass(frozen=True)
class JsonRpcRequest:
    method: str
    params: list[Any] = field(default_factory=list)
    id: int = DEFAULT_REQUEST_ID
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict[str, Any]:
        return {
            "method": self.method,
            "params": list(self.params),
            "id": self.id,
            "jsonrpc": self.jsonrpc,
        }


@dataclass(frozen=True)
class JsonRpcErrorObject:
    code: int = 0
    message: str = ""
    data: Any = None

    @classmethod
    def from_dict(cls, payload: Any) -> "JsonRpcErrorObject":
        if payload is None:
            return cls()
        if not isinstance(payload, dict):
            raise ProtocolError(f"Malformed error member in response: {payload!r}")
        try:
            code = int(payload.get("code") or 0)
        except (TypeError, ValueError) as exc:
            raise ProtocolError(f"Malformed error code: {payload.get('code')!r}") from exc
        return cls(
            code=code,
            message=str(payload.get("message") or ""),
            data=payload.get("data"),
        )


@dataclass(frozen=True)
class JsonRpcResponse:
    id: Optional[int] = None
    jsonrpc: str = ""
    message: Optional[str] = None
    result: Any = None
    error: JsonRpcErrorObject = field(default_factory=JsonRpcErrorObject)

    @classmethod
    def from_dict(cls, payload: Any) -> "JsonRpcResponse":
        """
        Decode a response envelope.

        Raises:
            ProtocolError: If the payload is not a JSON object
        """
        if not isinstance(payload, dict):
            raise ProtocolError(f"Response is not a JSON-RPC object: {payload!r}")
        return cls(
            id=payload.get("id"),
            jsonrpc=str(payload.get("jsonrpc") or ""),
            message=payload.get("message"),
            result=payload.get("result"),
            error=JsonRpcErrorObject.from_dict(payload.get("error")),
        )

    def unwrap(self, allow_null: bool = False) -> Any:
        """
        Return the result payload or raise the error it carries.

        Args:
            allow_null: Accept a null result as a valid answer (standard
                Ethereum nodes use it for "not found")

        Returns:
            The ``result`` member, unchanged

        Raises:
            RpcError: If ``error.code`` is non-zero
            ProtocolError: If there is no result and no error
        """
        if self.error.code != 0:
            raise RpcError(self.error.message, code=self.error.code, data=self.error.data)
        if self.result is None and not allow_null:
            raise ProtocolError(EMPTY_RESULT_MESSAGE)
        return self.result
