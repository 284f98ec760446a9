import os
import socket
import threading
import time
import urllib.request

from muxd.cli import build_parser, main
from muxd.client import check_daemon_status, stop_daemon


def _free_port():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.port == 7890
    assert args.log_level == "info"
    assert args.data_dir == "~/.muxd"
    assert args.command is None


def test_parser_start_foreground():
    args = build_parser().parse_args(["-p", "9000", "start", "-f"])
    assert args.command == "start"
    assert args.foreground is True
    assert args.port == 9000


def test_status_when_not_running(tmp_path, capsys):
    port = _free_port()
    code = main(["-p", str(port), "-d", str(tmp_path), "status"])
    assert code == 1
    assert f"muxd is not running on port {port}" in capsys.readouterr().out


def test_stop_when_not_running(tmp_path, capsys):
    port = _free_port()
    code = main(["-p", str(port), "-d", str(tmp_path), "stop"])
    assert code == 1
    assert "Failed to stop muxd" in capsys.readouterr().err


def test_start_refuses_when_already_running(tmp_path, capsys):
    (tmp_path / "muxd.pid").write_text(str(os.getpid()))
    code = main(["-p", str(_free_port()), "-d", str(tmp_path), "start", "-f"])
    assert code == 1
    assert f"muxd is already running (PID: {os.getpid()})" in capsys.readouterr().err


def _wait_until_running(port):
    deadline = time.monotonic() + 10
    while time.monotonic() < deadline:
        status = check_daemon_status(port)
        if status.get("running") is True:
            return status
        time.sleep(0.05)
    return check_daemon_status(port)


def test_foreground_server_lifecycle(tmp_path, capsys):
    port = _free_port()
    result = {}

    def run():
        result["code"] = main(["-p", str(port), "-d", str(tmp_path), "start", "-f"])

    thread = threading.Thread(target=run, daemon=True)
    thread.start()

    status = _wait_until_running(port)
    assert status["running"] is True
    assert status["sessions"] == 0
    assert (tmp_path / "muxd.pid").read_text() == str(os.getpid())

    with urllib.request.urlopen(f"http://127.0.0.1:{port}/health", timeout=5) as reply:
        assert reply.read().decode() == "OK"

    assert main(["-p", str(port), "-d", str(tmp_path), "status"]) == 0
    out = capsys.readouterr().out
    assert "muxd is running" in out
    assert f"  PID: {os.getpid()}" in out

    stop_daemon(port)
    thread.join(timeout=10)
    assert result["code"] == 0
    assert not (tmp_path / "muxd.pid").exists()
    assert check_daemon_status(port) == {"running": False, "port": port}