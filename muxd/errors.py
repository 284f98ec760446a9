"""Error types raised by muxd and their JSON-RPC error codes."""

from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    """JSON-RPC error codes, standard and muxd-specific."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
    SESSION_NOT_FOUND = 1001
    PANE_NOT_FOUND = 1002
    PERMISSION_DENIED = 1003
    RESOURCE_LIMIT = 1004
    INVALID_STATE = 1005


class MuxdError(Exception):
    """Base class of every muxd error."""

    rpc_code: int = -32603
    category: ErrorCode = ErrorCode.INTERNAL_ERROR

    def error_code(self) -> int:
        """Return the JSON-RPC error code sent to clients for this error."""
        return self.rpc_code


class _ReasonError(MuxdError):
    prefix = ""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"{self.prefix}: {reason}")


class SessionNotFound(MuxdError):
    rpc_code = -32001
    category = ErrorCode.SESSION_NOT_FOUND

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


class PaneNotFound(MuxdError):
    rpc_code = -32002
    category = ErrorCode.PANE_NOT_FOUND

    def __init__(self, pane_id: str) -> None:
        self.pane_id = pane_id
        super().__init__(f"Pane not found: {pane_id}")


class PermissionDenied(_ReasonError):
    prefix = "Permission denied"
    rpc_code = -32009
    category = ErrorCode.PERMISSION_DENIED


class ResourceLimit(MuxdError):
    rpc_code = -32003
    category = ErrorCode.RESOURCE_LIMIT

    def __init__(self, resource: str, limit: int) -> None:
        self.resource = resource
        self.limit = limit
        super().__init__(f"Resource limit exceeded: {resource} (limit: {limit})")


class InvalidState(_ReasonError):
    prefix = "Invalid state"
    rpc_code = -32004
    category = ErrorCode.INVALID_STATE


class InvalidRequest(_ReasonError):
    prefix = "Invalid request"
    rpc_code = -32600


class MethodNotFound(MuxdError):
    rpc_code = -32601

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Method not found: {method}")


class InvalidParams(_ReasonError):
    prefix = "Invalid params"
    rpc_code = -32602


class AuthError(_ReasonError):
    prefix = "Auth error"
    rpc_code = -32005


class ChannelClosed(MuxdError):
    rpc_code = -32006

    def __init__(self) -> None:
        super().__init__("Channel closed")


class ServerError(MuxdError):
    rpc_code = -32007

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Server error: {message}")


class MuxdConnectionError(_ReasonError):
    prefix = "Connection error"
    rpc_code = -32010


class MuxdIOError(MuxdError):
    rpc_code = -32008

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"IO error: {detail}")


class JsonError(MuxdError):
    rpc_code = -32700

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"JSON error: {detail}")


def error_code_for(error: MuxdError) -> ErrorCode:
    """Classify an error into an ErrorCode; unknown kinds are internal errors."""
    return error.category