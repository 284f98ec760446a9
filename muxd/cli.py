"""Command line entry point for the muxd daemon."""

from __future__ import annotations

import argparse
import json
import logging
import os
import signal
import sys
import threading
from http import HTTPStatus
from typing import Any

from websockets.sync.server import serve

from .client import check_daemon_status, stop_daemon
from .daemon import Daemon
from .errors import MuxdError, ServerError
from .types import MuxdConfig

logger = logging.getLogger(__name__)

_VERSION = "0.1.0"
_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def _port(value: str) -> int:
    try:
        port = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid port: {value!r}") from exc
    if not 0 <= port <= 0xFFFF:
        raise argparse.ArgumentTypeError(f"invalid port: {value!r}")
    return port


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="muxd", description="Multiplexer Daemon for orchflow")
    parser.add_argument("-p", "--port", type=_port, default=7890, help="Port to listen on")
    parser.add_argument("-l", "--log-level", default="info", help="Log level")
    parser.add_argument("-d", "--data-dir", default="~/.muxd", help="Data directory for persistence")
    commands = parser.add_subparsers(dest="command")
    start = commands.add_parser("start", help="Start the daemon")
    start.add_argument("-f", "--foreground", action="store_true", help="Run in foreground")
    commands.add_parser("stop", help="Stop the daemon")
    commands.add_parser("status", help="Check daemon status")
    return parser


def _rpc_error(request_id: Any, code: int, message: str) -> str:
    return json.dumps(
        {"jsonrpc": "2.0", "error": {"code": code, "message": message}, "id": request_id}
    )


def _dispatch(text: str, config: MuxdConfig) -> tuple[str | None, bool]:
    """Answer one incoming message; the flag asks for server shutdown."""
    try:
        message = json.loads(text)
    except ValueError:
        logger.error("Failed to parse JSON: %s", text)
        return _rpc_error(None, -32700, "Parse error"), False
    if not isinstance(message, dict) or message.get("jsonrpc") != "2.0":
        return _rpc_error(None, -32600, "Invalid Request"), False
    method = message.get("method")
    if not isinstance(method, str):
        logger.error("Error handling message: Invalid request: Missing method")
        return None, False

    has_id = "id" in message
    request_id = message.get("id")
    if method == "server_status":
        result: Any = {
            "running": True,
            "version": _VERSION,
            "sessions": 0,
            "total_panes": 0,
            "uptime_seconds": 0,
            "config": {
                "max_sessions": config.max_sessions,
                "max_panes_per_session": config.max_panes_per_session,
            },
        }
        shutdown = False
    elif method == "server_shutdown":
        result = {"status": "shutting_down"}
        shutdown = True
    else:
        return _rpc_error(request_id, -32601, "Method not found"), False

    reply = json.dumps({"jsonrpc": "2.0", "result": result, "id": request_id}) if has_id else None
    return reply, shutdown


def _route(connection, request):
    if request.path == "/ws":
        return None
    if request.path == "/":
        return connection.respond(HTTPStatus.OK, "muxd - Multiplexer Daemon")
    if request.path == "/health":
        return connection.respond(HTTPStatus.OK, "OK")
    return connection.respond(HTTPStatus.NOT_FOUND, "Not Found")


def _raise_interrupt(signum, frame):
    raise KeyboardInterrupt


def _serve(config: MuxdConfig) -> None:
    """Run the WebSocket server until asked to shut down."""
    holder: dict[str, Any] = {}

    def handle(ws) -> None:
        for message in ws:
            if not isinstance(message, str):
                logger.warning("Binary messages not supported")
                continue
            reply, shutdown = _dispatch(message, config)
            if reply is not None:
                ws.send(reply)
            if shutdown:
                logger.info("Received shutdown request, shutting down")
                threading.Thread(target=holder["server"].shutdown, daemon=True).start()
                return
        logger.info("Client disconnected")

    try:
        server = serve(handle, "0.0.0.0", config.port, process_request=_route)
    except OSError as exc:
        raise ServerError(f"Failed to bind to address: {exc}") from exc
    holder["server"] = server
    logger.info("Starting muxd server on 0.0.0.0:%d", config.port)

    in_main = threading.current_thread() is threading.main_thread()
    previous = signal.signal(signal.SIGTERM, _raise_interrupt) if in_main else None
    try:
        with server:
            server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Received interrupt, shutting down")
    finally:
        if in_main:
            signal.signal(signal.SIGTERM, previous)
    logger.info("Server shutdown complete")


def _start(config: MuxdConfig, foreground: bool) -> int:
    logger.info("Starting muxd on port %d", config.port)
    daemon = Daemon(config.data_dir)
    if daemon.is_running():
        print(f"muxd is already running (PID: {daemon.pid() or 0})", file=sys.stderr)
        return 1
    if foreground:
        daemon.write_pid()
        logger.info("Running in foreground")
    else:
        daemon.daemonize()
        logger.info("Running as daemon")
    try:
        _serve(config)
    finally:
        try:
            daemon.remove_pid_file()
        except MuxdError:
            pass
    return 0


def _stop(config: MuxdConfig) -> int:
    logger.info("Stopping muxd")
    daemon = Daemon(config.data_dir)
    if os.name == "posix" and daemon.is_running():
        try:
            daemon.stop()
        except MuxdError as exc:
            logger.info("Failed to stop via signal, trying WebSocket: %s", exc)
        else:
            print("muxd stopped successfully")
            return 0
    try:
        stop_daemon(config.port)
    except MuxdError as exc:
        print(f"Failed to stop muxd: {exc}", file=sys.stderr)
        return 1
    print("muxd stopped successfully")
    return 0


def _count(value: Any) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    return None


def _status(config: MuxdConfig) -> int:
    daemon = Daemon(config.data_dir)
    try:
        status = check_daemon_status(config.port)
    except MuxdError as exc:
        print(f"Failed to check status: {exc}", file=sys.stderr)
        return 1
    if not (isinstance(status, dict) and status.get("running") is True):
        print(f"muxd is not running on port {config.port}")
        return 1
    print("muxd is running")
    pid = daemon.pid()
    if pid is not None:
        print(f"  PID: {pid}")
    if isinstance(status.get("version"), str):
        print(f"  Version: {status['version']}")
    sessions = _count(status.get("sessions"))
    if sessions is not None:
        print(f"  Sessions: {sessions}")
    panes = _count(status.get("total_panes"))
    if panes is not None:
        print(f"  Total panes: {panes}")
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=_LEVELS.get(args.log_level.lower(), logging.INFO))

    config = MuxdConfig(
        port=args.port,
        log_level=args.log_level,
        data_dir=os.path.expanduser(args.data_dir),
    )
    try:
        if args.command == "start":
            return _start(config, args.foreground)
        if args.command == "stop":
            return _stop(config)
        if args.command == "status":
            return _status(config)
        logger.info("Starting muxd on port %d", config.port)
        _serve(config)
        return 0
    except MuxdError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1