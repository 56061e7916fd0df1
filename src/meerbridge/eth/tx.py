"""
Transaction Builder - Build, sign, and send contract calls on MeerEVM.

Uses eth-account for signing and the httpx-based EthClient for sending.
Transactions are EIP-1559 (type 2) priced from ``fees.suggest_gas_prices``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from eth_account.signers.local import LocalAccount

from ..utils import to_checksum_address
from .client import EthClient
from .fees import suggest_gas_prices

logger = logging.getLogger(__name__)


def build_contract_tx(
    eth: EthClient,
    account: LocalAccount,
    contract_address: str,
    calldata: str,
    chain_id: int,
    value: int = 0,
    gas_limit: Optional[int] = None,
) -> dict[str, Any]:
    """
    Build an unsigned contract call transaction.

    Args:
        eth: Node client used for nonce, fee and gas lookups
        account: Sending account
        contract_address: 0x-prefixed contract address
        calldata: 0x-prefixed ABI-encoded call
        chain_id: Target chain ID (replay protection)
        value: Native value in wei
        gas_limit: Gas limit (default: eth_estimateGas)

    Returns:
        Unsigned transaction dict
    """
    to = to_checksum_address(contract_address)
    nonce = eth.get_transaction_count(account.address, "pending")
    prices = suggest_gas_prices(eth)
    if gas_limit is None:
        gas_limit = eth.estimate_gas(
            {"from": account.address, "to": to, "data": calldata, "value": hex(value)}
        )

    return {
        "type": 2,
        "chainId": chain_id,
        "nonce": nonce,
        "to": to,
        "value": value,
        "data": calldata,
        "gas": gas_limit,
        "maxFeePerGas": prices.max_fee_per_gas,
        "maxPriorityFeePerGas": prices.max_priority_fee_per_gas,
    }


def sign_and_send(eth: EthClient, account: LocalAccount, tx: dict[str, Any]) -> str:
    """
    Sign a transaction and submit it.

    Returns:
        0x-prefixed hash of the signed transaction.  This confirms
        submission only; poll ``eth_getTransactionReceipt`` for inclusion.
    """
    signed = account.sign_transaction(tx)
    raw_tx = "0x" + bytes(signed.raw_transaction).hex()
    tx_hash = "0x" + bytes(signed.hash).hex()

    node_hash = eth.send_raw_transaction(raw_tx)
    if node_hash and str(node_hash).lower() != tx_hash:
        logger.warning("Node reported hash %s for transaction %s", node_hash, tx_hash)
    logger.debug("Submitted transaction %s (nonce %d)", tx_hash, tx["nonce"])
    return tx_hash
