__all__ = [
    # Errors
    "BridgeError",
    "TransportError",
    "ProtocolError",
    "RpcError",
    "EncodingError",
    "SubmissionError",
    "GasEstimateError",
    "ConfigError",
    # qng JSON-RPC
    "JsonRpcRequest",
    "JsonRpcResponse",
    "QngClient",
    "qng_web3_request",
    "RpcAdapter",
    # MeerEVM
    "EthClient",
    "GasPrices",
    "Overhead",
    "UserOperation",
    # Bridge
    "QngUserOp",
    "QngCross",
    "qng_cross_meer_change",
    # Capability providers
    "Providers",
    # Wiring
    "BridgeConfig",
    "build_adapter",
    "build_providers",
    "EOA",
]

from .errors import (
    BridgeError,
    ConfigError,
    EncodingError,
    GasEstimateError,
    ProtocolError,
    RpcError,
    SubmissionError,
    TransportError,
)
from .qng.envelope import JsonRpcRequest, JsonRpcResponse
from .qng.rpc import QngClient, qng_web3_request
from .qng.adapter import RpcAdapter
from .eth.client import EthClient
from .eth.fees import GasPrices
from .eth.gas import Overhead
from .eth.userop import UserOperation
from .bridge.meerchange import QngCross, QngUserOp, qng_cross_meer_change
from .providers import Providers
from .config import BridgeConfig, build_adapter, build_providers
from .signer import EOA
