"""
JSON-RPC client for the primary (MeerEVM) chain.

Lightweight alternative to web3.py: httpx for HTTP, eth-abi for encoding.
Covers the reads and writes the bridge and the capability providers need.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from ..errors import ProtocolError
from ..qng.rpc import JsonRpcClient
from ..utils import from_quantity, to_quantity

BlockId = Union[int, str]


def _block_param(block: BlockId) -> str:
    return to_quantity(block) if isinstance(block, int) else block


class EthClient(JsonRpcClient):
    """
    Standard Ethereum JSON-RPC client.

    Unlike the qng namespace, a ``null`` result is a valid answer here
    (unknown receipt, unknown transaction).
    """

    allow_null_result = True

    def _quantity(self, method: str, params: list[Any]) -> int:
        # null is only a valid answer for lookups, never for a quantity
        result = self.request(method, params)
        if result is None:
            raise ProtocolError(f"{method} returned null")
        return from_quantity(result)

    def block_number(self) -> int:
        return self._quantity("eth_blockNumber", [])

    def get_block(self, block: BlockId = "latest", full_transactions: bool = False) -> Optional[dict]:
        return self.request("eth_getBlockByNumber", [_block_param(block), full_transactions])

    def get_transaction_count(self, address: str, block: BlockId = "pending") -> int:
        return self._quantity("eth_getTransactionCount", [address, _block_param(block)])

    def gas_price(self) -> int:
        return self._quantity("eth_gasPrice", [])

    def max_priority_fee_per_gas(self) -> int:
        return self._quantity("eth_maxPriorityFeePerGas", [])

    def estimate_gas(
        self,
        tx: dict[str, Any],
        block: BlockId = "latest",
        overrides: Optional[dict[str, Any]] = None,
    ) -> int:
        params: list[Any] = [tx, _block_param(block)]
        if overrides:
            params.append(overrides)
        return self._quantity("eth_estimateGas", params)

    def call(
        self,
        tx: dict[str, Any],
        block: BlockId = "latest",
        overrides: Optional[dict[str, Any]] = None,
    ) -> str:
        """
        Execute ``eth_call``.

        A revert surfaces as ``RpcError`` whose ``data`` holds the revert
        payload.
        """
        params: list[Any] = [tx, _block_param(block)]
        if overrides:
            params.append(overrides)
        return self.request("eth_call", params)

    def send_raw_transaction(self, raw_tx: str) -> str:
        return self.request("eth_sendRawTransaction", [raw_tx])

    def get_transaction_by_hash(self, tx_hash: str) -> Optional[dict]:
        return self.request("eth_getTransactionByHash", [tx_hash])

    def get_transaction_receipt(self, tx_hash: str) -> Optional[dict]:
        return self.request("eth_getTransactionReceipt", [tx_hash])

    def get_logs(
        self,
        address: str,
        topics: list[Any],
        from_block: BlockId,
        to_block: BlockId = "latest",
    ) -> list[dict]:
        return self.request(
            "eth_getLogs",
            [
                {
                    "address": address,
                    "topics": topics,
                    "fromBlock": _block_param(from_block),
                    "toBlock": _block_param(to_block),
                }
            ],
        ) or []
