"""
RPC adapter exposing the ``qng_*`` methods served by the bundler.

Each method is a thin forward: the four qng reads/writes go to the qng node
through ``QngClient``; ``qng_crossSend`` goes to the MeerChange bridge.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from ..bridge.meerchange import QngCrossFunc, QngUserOp
from ..errors import BridgeError, RpcError
from .rpc import QngWeb3Func

METHOD_NOT_FOUND = -32601


class RpcAdapter:
    """
    Args:
        qng: ``(method, params) -> result`` invoker for the qng node
        cross: Bridge invoker; ``qng_crossSend`` fails when it is not set
    """

    def __init__(self, qng: QngWeb3Func, cross: Optional[QngCrossFunc] = None) -> None:
        self._qng = qng
        self._cross = cross

    def qng_get_balance(self, addr: str, coin_id: int) -> Any:
        return self._qng("qng_getBalance", [addr, coin_id])

    def qng_add_balance(self, addr: str) -> Any:
        return self._qng("qng_addBalance", [addr])

    def qng_get_utxos(self, addr: str, limit: int, locked: bool) -> Any:
        return self._qng("qng_getUTXOs", [addr, limit, locked])

    def qng_send_raw_transaction(self, sign_raw_tx: str, allow_high_fee: bool) -> Any:
        return self._qng("qng_sendRawTransaction", [sign_raw_tx, allow_high_fee])

    def qng_cross_send(self, txid: str, idx: int, fee: int, sig: str) -> str:
        """
        Bridge a qng output onto MeerEVM.

        Returns:
            Hash of the submitted ``export4337`` transaction (submission,
            not inclusion)

        Raises:
            BridgeError: No bridge configured
            EncodingError, SubmissionError: From the bridge
        """
        if self._cross is None:
            raise BridgeError("qng_crossSend is not available: no MeerChange bridge configured")
        return self._cross(QngUserOp(txid=txid, idx=idx, fee=fee, sig=sig))

    def _methods(self) -> dict[str, Callable[..., Any]]:
        return {
            "qng_getBalance": self.qng_get_balance,
            "qng_addBalance": self.qng_add_balance,
            "qng_getUTXOs": self.qng_get_utxos,
            "qng_sendRawTransaction": self.qng_send_raw_transaction,
            "qng_crossSend": self.qng_cross_send,
        }

    def call(self, method: str, params: Optional[list] = None) -> Any:
        """Dispatch a wire method name to the matching adapter method."""
        handler = self._methods().get(method)
        if handler is None:
            raise RpcError(f"the method {method} does not exist/is not available", code=METHOD_NOT_FOUND)
        return handler(*(params or []))
