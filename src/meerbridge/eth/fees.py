from __future__ import annotations

from dataclasses import dataclass

from ..utils import from_quantity
from .client import EthClient


@dataclass(frozen=True)
class GasPrices:
    max_fee_per_gas: int
    max_priority_fee_per_gas: int


def suggest_gas_prices(eth: EthClient) -> GasPrices:
    """
    Fetch maxFeePerGas / maxPriorityFeePerGas from the node.

    Chains without a base fee fall back to the legacy gas price for both.
    """
    head = eth.get_block("latest")
    base_fee = (head or {}).get("baseFeePerGas")
    if base_fee is None:
        gas_price = eth.gas_price()
        return GasPrices(max_fee_per_gas=gas_price, max_priority_fee_per_gas=gas_price)

    tip = eth.max_priority_fee_per_gas()
    return GasPrices(
        max_fee_per_gas=tip + 2 * from_quantity(base_fee),
        max_priority_fee_per_gas=tip,
    )
