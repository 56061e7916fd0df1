"""
Process wiring: read settings from the environment and build the adapter
and capability providers once at startup.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

import httpx
from dotenv import load_dotenv

from .bridge.meerchange import QngCross
from .eth.client import EthClient
from .errors import ConfigError
from .eth.gas import Overhead
from .providers import Providers
from .qng.adapter import RpcAdapter
from .qng.rpc import DEFAULT_TIMEOUT, QngClient
from .signer import EOA, MEERBRIDGE_ENV

DEFAULT_QNG_RPC_URL = "http://127.0.0.1:18131"
DEFAULT_ETH_RPC_URL = "http://127.0.0.1:18545"
DEFAULT_CHAIN_ID = 813  # MeerEVM mainnet
DEFAULT_MAX_GAS_LIMIT = 30_000_000


def _env_number(name: str, default: Any, parse: Callable[[str], Any]) -> Any:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return parse(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class BridgeConfig:
    qng_rpc_url: str = DEFAULT_QNG_RPC_URL
    eth_rpc_url: str = DEFAULT_ETH_RPC_URL
    chain_id: int = DEFAULT_CHAIN_ID
    meerchange_address: Optional[str] = None
    private_key: Optional[str] = field(default=None, repr=False)
    timeout: float = DEFAULT_TIMEOUT
    max_gas_limit: int = DEFAULT_MAX_GAS_LIMIT
    tracer: str = ""
    live_providers: bool = True

    @classmethod
    def from_env(cls, env_path: Optional[Path] = None) -> "BridgeConfig":
        """
        Read settings from the environment.

        Variables: QNG_RPC_URL, ETH_RPC_URL, CHAIN_ID, MEERCHANGE_ADDRESS,
        PRIVATE_KEY, RPC_TIMEOUT, MAX_GAS_LIMIT, GAS_TRACER, LIVE_PROVIDERS.
        ``env_path`` (default ~/.meerbridge/.env) is loaded first if present,
        without overriding variables already set.

        Raises:
            ConfigError: If a numeric setting does not parse
        """
        env_path = env_path or MEERBRIDGE_ENV
        if env_path.exists():
            load_dotenv(env_path, override=False)

        private_key = os.environ.get("PRIVATE_KEY") or None
        if private_key and not private_key.startswith("0x"):
            private_key = "0x" + private_key

        return cls(
            qng_rpc_url=os.environ.get("QNG_RPC_URL", DEFAULT_QNG_RPC_URL),
            eth_rpc_url=os.environ.get("ETH_RPC_URL", DEFAULT_ETH_RPC_URL),
            chain_id=_env_number("CHAIN_ID", DEFAULT_CHAIN_ID, int),
            meerchange_address=os.environ.get("MEERCHANGE_ADDRESS") or None,
            private_key=private_key,
            timeout=_env_number("RPC_TIMEOUT", DEFAULT_TIMEOUT, float),
            max_gas_limit=_env_number("MAX_GAS_LIMIT", DEFAULT_MAX_GAS_LIMIT, int),
            tracer=os.environ.get("GAS_TRACER", ""),
            live_providers=os.environ.get("LIVE_PROVIDERS", "1").lower() not in ("0", "false", "no"),
        )


def build_adapter(config: BridgeConfig, client: Optional[httpx.Client] = None) -> RpcAdapter:
    """
    Wire the qng invoker and, when a key and MeerChange address are
    configured, the cross-chain bridge.

    Raises:
        ConfigError: If the configured private key is invalid
    """
    qng = QngClient(config.qng_rpc_url, client=client, timeout=config.timeout)
    cross = None
    if config.private_key and config.meerchange_address:
        eth = EthClient(config.eth_rpc_url, client=client, timeout=config.timeout)
        cross = QngCross(
            eoa=EOA.from_private_key(config.private_key),
            eth=eth,
            meerchange_address=config.meerchange_address,
            chain_id=config.chain_id,
        )
    return RpcAdapter(qng.request, cross)


def build_providers(
    config: BridgeConfig,
    client: Optional[httpx.Client] = None,
    overhead: Optional[Overhead] = None,
) -> Providers:
    if not config.live_providers:
        return Providers.noop()
    eth = EthClient(config.eth_rpc_url, client=client, timeout=config.timeout)
    return Providers.with_eth_client(
        eth,
        overhead or Overhead(),
        config.chain_id,
        config.max_gas_limit,
        config.tracer,
    )
