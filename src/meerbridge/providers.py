"""
Capability providers for the bundler's validation and estimation pipeline.

Each capability is a one-method protocol with a no-op implementation (zero
or empty result, never raises) and a live implementation that holds an
``EthClient`` and forwards to the lookup / estimation subsystem, letting its
errors through unchanged.  The choice is made once at wiring time through
``Providers``; instances are frozen and never change afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol

from .eth import fees, gas, lookup
from .eth.client import EthClient
from .eth.fees import GasPrices
from .eth.lookup import HashLookupResult, UserOperationReceipt
from .eth.gas import EstimateInput, Overhead
from .eth.userop import OverrideSet, UserOperation


class UserOpReceiptProvider(Protocol):
    def get_user_op_receipt(
        self, user_op_hash: str, ep: str, blk_range: int
    ) -> Optional[UserOperationReceipt]:
        ...


class GasPricesProvider(Protocol):
    def get_gas_prices(self) -> GasPrices:
        ...


class GasEstimateProvider(Protocol):
    def get_gas_estimate(
        self, ep: str, op: UserOperation, sos: Optional[OverrideSet]
    ) -> tuple[int, int]:
        ...


class UserOpByHashProvider(Protocol):
    def get_user_op_by_hash(
        self, user_op_hash: str, ep: str, chain_id: int, blk_range: int
    ) -> Optional[HashLookupResult]:
        ...


# ============ No-op ============


@dataclass(frozen=True)
class NoopUserOpReceipt:
    def get_user_op_receipt(
        self, user_op_hash: str, ep: str, blk_range: int
    ) -> Optional[UserOperationReceipt]:
        return None


@dataclass(frozen=True)
class NoopGasPrices:
    def get_gas_prices(self) -> GasPrices:
        return GasPrices(max_fee_per_gas=0, max_priority_fee_per_gas=0)


@dataclass(frozen=True)
class NoopGasEstimate:
    def get_gas_estimate(
        self, ep: str, op: UserOperation, sos: Optional[OverrideSet]
    ) -> tuple[int, int]:
        return 0, 0


@dataclass(frozen=True)
class NoopUserOpByHash:
    def get_user_op_by_hash(
        self, user_op_hash: str, ep: str, chain_id: int, blk_range: int
    ) -> Optional[HashLookupResult]:
        return None


# ============ Live ============


@dataclass(frozen=True)
class EthUserOpReceipt:
    eth: EthClient

    def get_user_op_receipt(
        self, user_op_hash: str, ep: str, blk_range: int
    ) -> Optional[UserOperationReceipt]:
        return lookup.get_user_operation_receipt(self.eth, user_op_hash, ep, blk_range)


@dataclass(frozen=True)
class EthGasPrices:
    eth: EthClient

    def get_gas_prices(self) -> GasPrices:
        return fees.suggest_gas_prices(self.eth)


@dataclass(frozen=True)
class EthGasEstimate:
    eth: EthClient
    overhead: Overhead
    chain_id: int
    max_gas_limit: int
    tracer: str = ""

    def get_gas_estimate(
        self, ep: str, op: UserOperation, sos: Optional[OverrideSet]
    ) -> tuple[int, int]:
        return gas.estimate_gas(
            EstimateInput(
                rpc=self.eth,
                entry_point=ep,
                op=op,
                sos=sos,
                ov=self.overhead,
                chain_id=self.chain_id,
                max_gas_limit=self.max_gas_limit,
                tracer=self.tracer,
            )
        )


@dataclass(frozen=True)
class EthUserOpByHash:
    eth: EthClient

    def get_user_op_by_hash(
        self, user_op_hash: str, ep: str, chain_id: int, blk_range: int
    ) -> Optional[HashLookupResult]:
        return lookup.get_user_operation_by_hash(self.eth, user_op_hash, ep, chain_id, blk_range)


def get_user_op_receipt_with_eth_client(eth: EthClient) -> UserOpReceiptProvider:
    return EthUserOpReceipt(eth)


def get_gas_prices_with_eth_client(eth: EthClient) -> GasPricesProvider:
    return EthGasPrices(eth)


def get_gas_estimate_with_eth_client(
    eth: EthClient,
    overhead: Overhead,
    chain_id: int,
    max_gas_limit: int,
    tracer: str = "",
) -> GasEstimateProvider:
    return EthGasEstimate(eth, overhead, chain_id, max_gas_limit, tracer)


def get_user_op_by_hash_with_eth_client(eth: EthClient) -> UserOpByHashProvider:
    return EthUserOpByHash(eth)


# ============ Wiring ============


@dataclass(frozen=True)
class Providers:
    """The four provider slots, selected once at startup."""

    user_op_receipt: UserOpReceiptProvider = field(default_factory=NoopUserOpReceipt)
    gas_prices: GasPricesProvider = field(default_factory=NoopGasPrices)
    gas_estimate: GasEstimateProvider = field(default_factory=NoopGasEstimate)
    user_op_by_hash: UserOpByHashProvider = field(default_factory=NoopUserOpByHash)

    @classmethod
    def noop(cls) -> "Providers":
        return cls()

    @classmethod
    def with_eth_client(
        cls,
        eth: EthClient,
        overhead: Overhead,
        chain_id: int,
        max_gas_limit: int,
        tracer: str = "",
    ) -> "Providers":
        return cls(
            user_op_receipt=get_user_op_receipt_with_eth_client(eth),
            gas_prices=get_gas_prices_with_eth_client(eth),
            gas_estimate=get_gas_estimate_with_eth_client(
                eth, overhead, chain_id, max_gas_limit, tracer
            ),
            user_op_by_hash=get_user_op_by_hash_with_eth_client(eth),
        )
