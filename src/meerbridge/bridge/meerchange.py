"""
MeerChange - Bridge a qng operation onto MeerEVM through ``export4337``.

A ``QngUserOp`` names an already-validated qng transaction output
(txid, output index, fee, signature).  ``QngCross`` turns it into a signed
``export4337`` call on the MeerChange contract and returns the hash of the
submitted transaction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from eth_account.signers.local import LocalAccount

from ..errors import EncodingError, ProtocolError, RpcError, SubmissionError, TransportError
from ..eth.abi import encode_function_call, meerchange_abi
from ..eth.client import EthClient
from ..eth.tx import build_contract_tx, sign_and_send
from ..signer import EOA
from ..utils import bytes_to_hash32, check_uint, hex_to_bytes, to_checksum_address

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QngUserOp:
    txid: str
    idx: int
    fee: int
    sig: str

    def __post_init__(self) -> None:
        check_uint(self.idx, 32, "idx")
        check_uint(self.fee, 64, "fee")

    def txid_bytes(self) -> bytes:
        """The txid as a bytes32 value.

        Raises:
            EncodingError: If txid is not valid hex
        """
        return bytes_to_hash32(hex_to_bytes(self.txid))


QngCrossFunc = Callable[[QngUserOp], str]


@dataclass(frozen=True)
class MeerChange:
    """Binding for the MeerChange contract at ``address``."""

    address: str
    eth: EthClient

    def __post_init__(self) -> None:
        if len(hex_to_bytes(self.address)) != 20:
            raise EncodingError(f"Invalid MeerChange address: {self.address!r}")
        object.__setattr__(self, "address", to_checksum_address(self.address))

    def export4337(
        self,
        account: LocalAccount,
        chain_id: int,
        txid: bytes,
        idx: int,
        fee: int,
        sig: str,
    ) -> str:
        calldata = encode_function_call(meerchange_abi(), "export4337", [txid, idx, fee, sig])
        tx = build_contract_tx(self.eth, account, self.address, calldata, chain_id)
        return sign_and_send(self.eth, account, tx)


@dataclass(frozen=True)
class QngCross:
    """
    Cross-chain invoker bound to one signer, node and MeerChange deployment.

    Calling it with a ``QngUserOp`` returns the submitted transaction hash.
    """

    eoa: EOA
    eth: EthClient
    meerchange_address: str
    chain_id: int

    def __call__(self, op: QngUserOp) -> str:
        """
        Submit ``op`` through ``export4337``.

        Raises:
            EncodingError: txid is not hex (raised before any network call)
            SubmissionError: The node rejected or failed the submission, or
                answered with a malformed envelope
        """
        txid = op.txid_bytes()
        contract = MeerChange(self.meerchange_address, self.eth)
        account = self.eoa.account

        logger.debug("export4337 txid=0x%s idx=%d fee=%d", txid.hex(), op.idx, op.fee)
        try:
            tx_hash = contract.export4337(account, self.chain_id, txid, op.idx, op.fee, op.sig)
        except (TransportError, ProtocolError, RpcError) as exc:
            raise SubmissionError(f"export4337 submission failed: {exc}") from exc

        logger.info("Cross-chain op 0x%s:%d submitted as %s", txid.hex(), op.idx, tx_hash)
        return tx_hash


def qng_cross_meer_change(
    eoa: EOA,
    eth: EthClient,
    meerchange_address: str,
    chain_id: int,
) -> QngCrossFunc:
    return QngCross(eoa, eth, meerchange_address, chain_id)
