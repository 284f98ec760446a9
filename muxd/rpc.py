"""JSON-RPC 2.0 message envelopes."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from .errors import JsonError

RequestId = Union[int, str]


def _check_id(value: Any) -> RequestId:
    if isinstance(value, bool) or not (
        isinstance(value, str) or (isinstance(value, int) and value >= 0)
    ):
        raise JsonError(f"invalid request id: {value!r}")
    return value


def _require(data: Mapping, *keys: str) -> None:
    for key in keys:
        if key not in data:
            raise JsonError(f"missing field `{key}`")


@dataclass
class RpcError:
    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        out = {"code": self.code, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out

    @classmethod
    def from_dict(cls, data: Any) -> "RpcError":
        if not isinstance(data, Mapping):
            raise JsonError("error must be an object")
        _require(data, "code", "message")
        return cls(data["code"], data["message"], data.get("data"))


@dataclass
class Request:
    method: str = ""
    params: Any = field(default_factory=dict)
    id: RequestId = 0
    jsonrpc: str = "2.0"

    def to_dict(self) -> dict[str, Any]:
        return {"jsonrpc": self.jsonrpc, "id": self.id, "method": self.method, "params": self.params}

    @classmethod
    def from_dict(cls, data: Any) -> "Request":
        if not isinstance(data, Mapping):
            raise JsonError("request must be an object")
        _require(data, "jsonrpc", "id", "method", "params")
        return cls(data["method"], data["params"], _check_id(data["id"]), data["jsonrpc"])


@dataclass
class Response:
    id: RequestId
    result: Any = None
    error: RpcError | None = None
    jsonrpc: str = "2.0"

    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            out["error"] = self.error.to_dict()
        else:
            out["result"] = self.result
        return out

    @classmethod
    def from_dict(cls, data: Any) -> "Response":
        if not isinstance(data, Mapping):
            raise JsonError("response must be an object")
        _require(data, "jsonrpc", "id")
        request_id = _check_id(data["id"])
        if "result" in data:
            return cls(request_id, result=data["result"], jsonrpc=data["jsonrpc"])
        if "error" in data:
            return cls(request_id, error=RpcError.from_dict(data["error"]), jsonrpc=data["jsonrpc"])
        raise JsonError("response has neither result nor error")


@dataclass
class Notification:
    method: str
    params: Any = field(default_factory=dict)
    jsonrpc: str = "2.0"

    def to_dict(self) -> dict[str, Any]:
        return {"jsonrpc": self.jsonrpc, "method": self.method, "params": self.params}

    @classmethod
    def from_dict(cls, data: Any) -> "Notification":
        if not isinstance(data, Mapping):
            raise JsonError("notification must be an object")
        _require(data, "jsonrpc", "method", "params")
        return cls(data["method"], data["params"], data["jsonrpc"])


def parse_message(data: Any) -> Request | Response | Notification:
    """Decode a message, trying request, response and notification in turn."""
    if isinstance(data, (str, bytes, bytearray)):
        try:
            data = json.loads(data)
        except ValueError as exc:
            raise JsonError(str(exc)) from exc
    for kind in (Request, Response, Notification):
        try:
            return kind.from_dict(data)
        except JsonError:
            continue
    raise JsonError("data did not match any variant of Message")