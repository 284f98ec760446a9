"""Synchronous WebSocket client for a running muxd daemon."""

from __future__ import annotations

import json
from typing import Any

from websockets.exceptions import ConnectionClosed, WebSocketException
from websockets.sync.client import connect as ws_connect

from .errors import JsonError, MuxdConnectionError, MuxdError, ServerError
from .rpc import Request, Response

CONNECT_TIMEOUT = 5.0


class MuxdClient:
    """A JSON-RPC connection to the daemon's ``/ws`` endpoint."""

    def __init__(self, connection: Any) -> None:
        self._connection = connection

    @classmethod
    def connect(cls, port: int) -> "MuxdClient":
        """Open a connection to the daemon listening on ``port``."""
        url = f"ws://127.0.0.1:{port}/ws"
        try:
            connection = ws_connect(url, open_timeout=CONNECT_TIMEOUT)
        except TimeoutError as exc:
            raise MuxdConnectionError(
                f"Connection timeout - is muxd running on port {port}?"
            ) from exc
        except (OSError, WebSocketException) as exc:
            raise MuxdConnectionError(f"Failed to connect to muxd: {exc}") from exc
        return cls(connection)

    def __enter__(self) -> "MuxdClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def request(self, method: str, params: Any) -> Response:
        """Send one request and return the next message as its response."""
        request = Request(method, params, id=1)
        try:
            self._connection.send(json.dumps(request.to_dict()))
        except (OSError, WebSocketException) as exc:
            raise MuxdConnectionError(f"Failed to send request: {exc}") from exc

        try:
            message = self._connection.recv()
        except ConnectionClosed as exc:
            raise MuxdConnectionError("Connection closed by server") from exc
        except (OSError, WebSocketException) as exc:
            raise MuxdConnectionError(f"WebSocket error: {exc}") from exc

        if not isinstance(message, str):
            raise MuxdConnectionError("Unexpected message type")
        try:
            data = json.loads(message)
        except ValueError as exc:
            raise JsonError(str(exc)) from exc
        return Response.from_dict(data)

    def get_status(self) -> Any:
        """Ask the daemon for its status."""
        response = self.request("server_status", {})
        if response.error is not None:
            raise ServerError(response.error.message)
        return response.result

    def shutdown(self) -> None:
        """Ask the daemon to shut down."""
        response = self.request("server_shutdown", {})
        if response.error is not None:
            raise ServerError(response.error.message)

    def close(self) -> None:
        try:
            self._connection.close()
        except (OSError, WebSocketException) as exc:
            raise MuxdConnectionError(f"Failed to close connection: {exc}") from exc


def check_daemon_status(port: int) -> Any:
    """Status of the daemon on ``port``; reports not running when it cannot connect."""
    try:
        client = MuxdClient.connect(port)
    except MuxdError:
        return {"running": False, "port": port}
    try:
        return client.get_status()
    finally:
        try:
            client.close()
        except MuxdError:
            pass


def stop_daemon(port: int) -> None:
    """Ask the daemon on ``port`` to shut down."""
    client = MuxdClient.connect(port)
    try:
        client.shutdown()
    finally:
        try:
            client.close()
        except MuxdError:
            pass