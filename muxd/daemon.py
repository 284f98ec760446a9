"""PID-file based management of the muxd background process."""

from __future__ import annotations

import logging
import os
import re
import signal
import sys
import time
from pathlib import Path

from .errors import InvalidState, MuxdIOError

logger = logging.getLogger(__name__)

_UNIX = os.name == "posix"
_PID_PATTERN = re.compile(r"\+?[0-9]+")
_MAX_PID = 0xFFFFFFFF
_STOP_GRACE_SECONDS = 0.5


class Daemon:
    """Tracks the daemon process through ``muxd.pid`` in the data directory."""

    def __init__(self, data_dir: str | os.PathLike) -> None:
        self.pid_file = Path(data_dir) / "muxd.pid"
        try:
            self.pid_file.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise MuxdIOError(f"Failed to create data directory: {exc}") from exc

    def __enter__(self) -> "Daemon":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def _read_pid(self) -> int:
        try:
            contents = self.pid_file.read_text()
        except OSError as exc:
            raise MuxdIOError(f"Failed to open PID file: {exc}") from exc
        text = contents.strip()
        if not _PID_PATTERN.fullmatch(text) or int(text) > _MAX_PID:
            raise MuxdIOError(f"Invalid PID in file: {text!r}")
        return int(text)

    def is_running(self) -> bool:
        """Whether the process named in the PID file exists; stale files are removed."""
        try:
            pid = self._read_pid()
        except MuxdIOError:
            return False
        if not _UNIX:
            return True
        try:
            os.kill(pid, 0)
        except (OSError, OverflowError):
            try:
                self.remove_pid_file()
            except MuxdIOError:
                pass
            return False
        return True

    def pid(self) -> int | None:
        """The PID of the running daemon, or None."""
        if not self.is_running():
            return None
        try:
            return self._read_pid()
        except MuxdIOError:
            return None

    def write_pid(self) -> None:
        """Record the current process as the daemon."""
        pid = os.getpid()
        try:
            self.pid_file.write_text(str(pid))
        except OSError as exc:
            raise MuxdIOError(f"Failed to write PID: {exc}") from exc
        logger.info("Written PID %d to %s", pid, self.pid_file)

    def remove_pid_file(self) -> None:
        if self.pid_file.exists():
            try:
                self.pid_file.unlink()
            except OSError as exc:
                raise MuxdIOError(f"Failed to remove PID file: {exc}") from exc
            logger.info("Removed PID file %s", self.pid_file)

    def daemonize(self) -> None:
        """Detach the current process from its terminal and record it as the daemon."""
        if not _UNIX:
            raise InvalidState("Daemonization is only supported on Unix platforms")
        try:
            sys.stdout.flush()
            sys.stderr.flush()
            try:
                os.setsid()
            except PermissionError:
                # Already a process group leader; keep the current session.
                pass
            os.umask(0o027)
            signal.signal(signal.SIGHUP, signal.SIG_IGN)
            os.chdir(".")
            self.write_pid()
            self._redirect_stdio()
        except (OSError, MuxdIOError) as exc:
            logger.error("Failed to daemonize: %s", exc)
            raise MuxdIOError(f"Daemonization failed: {exc}") from exc
        logger.info("Successfully daemonized process")

    @staticmethod
    def _redirect_stdio() -> None:
        devnull = os.open(os.devnull, os.O_RDWR)
        try:
            for fd in (0, 1, 2):
                os.dup2(devnull, fd)
        finally:
            if devnull > 2:
                os.close(devnull)

    def stop(self) -> None:
        """Terminate the running daemon, killing it if it does not exit promptly."""
        if not _UNIX:
            raise InvalidState("Daemon stop is only supported on Unix platforms")
        pid = self.pid()
        if pid is None:
            raise InvalidState("No daemon is running")
        try:
            os.kill(pid, signal.SIGTERM)
        except OSError as exc:
            raise MuxdIOError(f"Failed to send stop signal: {exc}") from exc
        logger.info("Sent SIGTERM to process %d", pid)

        time.sleep(_STOP_GRACE_SECONDS)

        if self.is_running():
            try:
                os.kill(pid, signal.SIGKILL)
            except OSError as exc:
                raise MuxdIOError(f"Failed to send kill signal: {exc}") from exc
            logger.info("Sent SIGKILL to process %d", pid)

        self.remove_pid_file()

    def close(self) -> None:
        """Remove the PID file if it names this process."""
        try:
            pid = self._read_pid()
        except MuxdIOError:
            return
        if pid == os.getpid():
            try:
                self.remove_pid_file()
            except MuxdIOError:
                pass