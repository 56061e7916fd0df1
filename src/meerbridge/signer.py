"""
ECDSA / secp256k1 key holder for the bridge's transaction signing.

Keys are read from the environment (PRIVATE_KEY), optionally populated from
~/.meerbridge/.env.  Key material is never logged, printed or serialized.
"""

from __future__ import annotations

import os
import secrets
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from eth_account import Account
from eth_account.signers.local import LocalAccount

from .errors import ConfigError


# Default config directory
MEERBRIDGE_DIR = Path.home() / ".meerbridge"
MEERBRIDGE_ENV = MEERBRIDGE_DIR / ".env"


@dataclass(frozen=True)
class EOA:
    """Externally owned account used to sign bridge transactions."""

    address: str
    private_key: str = field(repr=False)

    @classmethod
    def from_private_key(cls, private_key: str) -> "EOA":
        """
        Raises:
            ConfigError: If the key is not 32 bytes of hex
        """
        account = _account_from_key(private_key)
        return cls(address=account.address, private_key=private_key)

    @property
    def account(self) -> LocalAccount:
        return _account_from_key(self.private_key)


def _account_from_key(private_key: str) -> LocalAccount:
    try:
        return Account.from_key(private_key)
    except ValueError:
        # the original message may echo key material
        raise ConfigError("PRIVATE_KEY is not a valid secp256k1 private key") from None


def generate_eoa() -> tuple[str, str]:
    """
    Generate a new ECDSA/secp256k1 keypair (EOA).

    Returns:
        Tuple of (private_key_hex, address)
    """
    private_key = "0x" + secrets.token_hex(32)
    account = Account.from_key(private_key)
    return private_key, account.address


def load_private_key(env_path: Optional[Path] = None) -> str:
    """
    Load private key from .env file or environment.

    Args:
        env_path: Path to .env file (default: ~/.meerbridge/.env)

    Returns:
        0x-prefixed hex private key

    Raises:
        ValueError: If PRIVATE_KEY is not set
    """
    env_path = env_path or MEERBRIDGE_ENV

    if env_path.exists():
        load_dotenv(env_path, override=True)

    private_key = os.environ.get("PRIVATE_KEY")
    if not private_key:
        raise ValueError(f"PRIVATE_KEY not found. Set it in the environment or in {env_path}")

    if not private_key.startswith("0x"):
        private_key = "0x" + private_key

    return private_key


def get_account(private_key: Optional[str] = None) -> LocalAccount:
    if private_key is None:
        private_key = load_private_key()
    return _account_from_key(private_key)


def get_address(private_key: Optional[str] = None) -> str:
    return get_account(private_key).address
