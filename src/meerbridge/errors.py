"""
Error taxonomy shared by the qng invoker, the node client and the bridge.

Every failure is raised to the immediate caller.  ``exit_code`` is only
consulted by the CLI.
"""

from __future__ import annotations

from typing import Any


class BridgeError(RuntimeError):
    exit_code: int = 1


class TransportError(BridgeError):
    """HTTP round trip failed or the body was not JSON."""

    exit_code = 2


class ProtocolError(BridgeError):
    """Response envelope was malformed or carried neither result nor error."""

    exit_code = 3


class RpcError(BridgeError):
    """Error reported by the node inside the response envelope."""

    exit_code = 4

    def __init__(self, message: str, code: int = 0, data: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.data = data


class EncodingError(BridgeError, ValueError):
    exit_code = 5


class SubmissionError(BridgeError):
    exit_code = 6


class GasEstimateError(BridgeError):
    exit_code = 7


class ConfigError(BridgeError, ValueError):
    """A setting or the signing key could not be parsed."""

    exit_code = 8
