from __future__ import annotations

import json
from typing import Any, Callable, Union

import httpx
import pytest

Reply = Union[dict[str, Any], Callable[[list], dict[str, Any]]]


class FakeNode:
    """
    In-process JSON-RPC node for httpx.MockTransport.

    ``replies`` maps a method name to an envelope fragment ({"result": ...}
    or {"error": {...}}) or to a callable building one from the params.
    """

    def __init__(self, replies: dict[str, Reply] | None = None) -> None:
        self.replies: dict[str, Reply] = dict(replies or {})
        self.requests: list[dict[str, Any]] = []
        self.headers: list[httpx.Headers] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append(body)
        self.headers.append(request.headers)
        reply = self.replies.get(body["method"])
        if callable(reply):
            reply = reply(body["params"])
        if reply is None:
            reply = {"error": {"code": -32601, "message": f"method {body['method']} not found"}}
        return httpx.Response(200, json={"id": body["id"], "jsonrpc": "2.0", **reply})

    @property
    def methods(self) -> list[str]:
        return [r["method"] for r in self.requests]

    def params(self, method: str) -> list:
        for r in self.requests:
            if r["method"] == method:
                return r["params"]
        raise AssertionError(f"{method} was never called")

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))


@pytest.fixture()
def node() -> FakeNode:
    return FakeNode()
