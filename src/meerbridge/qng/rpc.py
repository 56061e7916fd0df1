"""
Generic JSON-RPC invoker.

One request, one HTTP POST, one decoded envelope.  No retries: a failed call
propagates immediately and backoff is left to the caller.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import httpx

from ..errors import ProtocolError, RpcError, TransportError
from .envelope import JsonRpcRequest, JsonRpcResponse

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

QngWeb3Func = Callable[[str, list], Any]


class JsonRpcClient:
    """
    Synchronous JSON-RPC 2.0 client over HTTP POST.

    Args:
        url: Node endpoint URL
        client: Shared ``httpx.Client`` reused across calls.  It is never
            closed here; without one a client is opened per call.
        timeout: Per-call timeout in seconds when no client is injected
    """

    allow_null_result = False

    def __init__(
        self,
        url: str,
        client: Optional[httpx.Client] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._url = url
        self._client = client
        self._timeout = timeout

    @property
    def url(self) -> str:
        return self._url

    def request(self, method: str, params: Optional[list] = None) -> Any:
        """
        Invoke ``method`` with ``params`` and return the decoded result.

        Raises:
            TransportError: Connection failure, timeout or non-JSON body
            RpcError: Node returned a non-zero error code
            ProtocolError: Envelope carried neither a result nor an error
        """
        payload = JsonRpcRequest(method=method, params=list(params or [])).to_dict()
        logger.debug("POST %s %s", self._url, method)

        data = self._post(payload)
        try:
            return JsonRpcResponse.from_dict(data).unwrap(allow_null=self.allow_null_result)
        except RpcError as exc:
            logger.debug("%s returned error %d: %s", method, exc.code, exc.message)
            raise
        except ProtocolError as exc:
            logger.debug("%s returned a malformed envelope: %s", method, exc)
            raise

    def _post(self, payload: dict[str, Any]) -> Any:
        headers = {"Content-Type": "application/json"}
        try:
            if self._client is not None:
                response = self._client.post(self._url, json=payload, headers=headers)
                return response.json()
            with httpx.Client(timeout=self._timeout) as client:
                response = client.post(self._url, json=payload, headers=headers)
                return response.json()
        except httpx.HTTPError as exc:
            logger.debug("Transport failure calling %s: %s", payload["method"], exc)
            raise TransportError(f"{payload['method']}: {exc}") from exc
        except ValueError as exc:
            logger.debug("Undecodable body from %s: %s", payload["method"], exc)
            raise TransportError(f"{payload['method']}: invalid JSON response: {exc}") from exc


class QngClient(JsonRpcClient):
    """Client for the qng chain's ``qng_*`` namespace; null results are errors."""


def qng_web3_request(url: str, client: Optional[httpx.Client] = None) -> QngWeb3Func:
    """Return a ``(method, params) -> result`` callable bound to ``url``."""
    return QngClient(url, client=client).request
