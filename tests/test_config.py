"""Tests for environment configuration and startup wiring."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from meerbridge.bridge.meerchange import QngCross
from meerbridge.config import BridgeConfig, build_adapter, build_providers
from meerbridge.errors import BridgeError, ConfigError
from meerbridge.providers import EthGasPrices, NoopGasPrices
from meerbridge.signer import generate_eoa


@pytest.fixture()
def missing_env(tmp_path: Path) -> Path:
    return tmp_path / "nonexistent" / ".env"


class TestFromEnv:
    def test_defaults(self, missing_env: Path) -> None:
        with patch.dict(os.environ, {}, clear=True):
            config = BridgeConfig.from_env(missing_env)
        assert config == BridgeConfig()
        assert config.private_key is None

    def test_environment_values(self, missing_env: Path) -> None:
        env = {
            "QNG_RPC_URL": "http://qng:1234",
            "ETH_RPC_URL": "http://meer:8545",
            "CHAIN_ID": "8131",
            "MEERCHANGE_ADDRESS": "0x" + "42" * 20,
            "PRIVATE_KEY": "ab" * 32,
            "RPC_TIMEOUT": "5",
            "LIVE_PROVIDERS": "false",
        }
        with patch.dict(os.environ, env, clear=True):
            config = BridgeConfig.from_env(missing_env)

        assert config.qng_rpc_url == "http://qng:1234"
        assert config.eth_rpc_url == "http://meer:8545"
        assert config.chain_id == 8131
        assert config.private_key == "0x" + "ab" * 32
        assert config.timeout == 5.0
        assert config.live_providers is False

    def test_dotenv_file(self, tmp_path: Path) -> None:
        env_path = tmp_path / ".env"
        env_path.write_text("QNG_RPC_URL=http://from-file:1\n", encoding="utf-8")
        with patch.dict(os.environ, {}, clear=True):
            assert BridgeConfig.from_env(env_path).qng_rpc_url == "http://from-file:1"

    @pytest.mark.parametrize("name", ["CHAIN_ID", "RPC_TIMEOUT", "MAX_GAS_LIMIT"])
    def test_malformed_number(self, missing_env: Path, name: str) -> None:
        with patch.dict(os.environ, {name: "0x"}, clear=True):
            with pytest.raises(ConfigError, match=name):
                BridgeConfig.from_env(missing_env)

    def test_private_key_hidden_from_repr(self) -> None:
        config = BridgeConfig(private_key="0x" + "ab" * 32)
        assert "ab" * 32 not in repr(config)


class TestWiring:
    def test_adapter_without_key_has_no_bridge(self, node) -> None:
        node.replies["qng_getBalance"] = {"result": "1000"}
        adapter = build_adapter(BridgeConfig(qng_rpc_url="http://qng.test"), client=node.client())

        assert adapter.qng_get_balance("0xABC", 1) == "1000"
        with pytest.raises(BridgeError):
            adapter.qng_cross_send("aa", 0, 0, "s")

    def test_adapter_with_bridge(self) -> None:
        private_key, address = generate_eoa()
        config = BridgeConfig(private_key=private_key, meerchange_address="0x" + "42" * 20)
        adapter = build_adapter(config)

        cross = adapter._cross
        assert isinstance(cross, QngCross)
        assert cross.eoa.address == address
        assert cross.chain_id == config.chain_id

    def test_invalid_private_key(self) -> None:
        config = BridgeConfig(private_key="0xnothex", meerchange_address="0x" + "42" * 20)
        with pytest.raises(ConfigError) as exc_info:
            build_adapter(config)
        assert "nothex" not in str(exc_info.value)

    def test_providers_selection(self) -> None:
        assert isinstance(build_providers(BridgeConfig(live_providers=False)).gas_prices, NoopGasPrices)
        assert isinstance(build_providers(BridgeConfig()).gas_prices, EthGasPrices)
