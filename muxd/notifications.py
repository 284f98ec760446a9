"""Server-to-client notifications."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Union

from .errors import JsonError
from .types import Payload, decode_datetime, encode_value


@dataclass
class PaneOutputNotification(Payload):
    pane_id: str
    data: str
    timestamp: datetime
    _decoders: ClassVar[dict] = {"timestamp": decode_datetime}


@dataclass
class PaneExitNotification(Payload):
    pane_id: str
    exit_code: int
    timestamp: datetime
    _decoders: ClassVar[dict] = {"timestamp": decode_datetime}


@dataclass
class SessionChanges:
    """Changed session fields; unknown keys are kept in ``other``."""

    name: str | None = None
    active_pane: str | None = None
    other: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        out = dict(self.other)
        if self.name is not None:
            out["name"] = self.name
        if self.active_pane is not None:
            out["active_pane"] = self.active_pane
        return out

    @classmethod
    def from_dict(cls, data: Any) -> "SessionChanges":
        if not isinstance(data, Mapping):
            raise JsonError("changes must be an object")
        rest = {k: v for k, v in data.items() if k not in ("name", "active_pane")}
        return cls(data.get("name"), data.get("active_pane"), rest)


@dataclass
class SessionChangedNotification(Payload):
    session_id: str
    changes: SessionChanges
    _decoders: ClassVar[dict] = {"changes": SessionChanges.from_dict}


@dataclass
class PaneResizedNotification(Payload):
    pane_id: str
    rows: int
    cols: int
    timestamp: datetime
    _decoders: ClassVar[dict] = {"timestamp": decode_datetime}


@dataclass
class ErrorNotification(Payload):
    code: int
    message: str
    timestamp: datetime
    context: dict[str, Any] | None = None
    _omit_none: ClassVar[frozenset] = frozenset({"context"})
    _decoders: ClassVar[dict] = {"timestamp": decode_datetime}


NotificationType = Union[
    PaneOutputNotification,
    PaneExitNotification,
    SessionChangedNotification,
    PaneResizedNotification,
    ErrorNotification,
]

_KINDS: dict[type, tuple[str, str]] = {
    PaneOutputNotification: ("pane_output", "pane.output"),
    PaneExitNotification: ("pane_exit", "pane.exit"),
    SessionChangedNotification: ("session_changed", "session.changed"),
    PaneResizedNotification: ("pane_resized", "pane.resized"),
    ErrorNotification: ("error", "error"),
}
_BY_TAG = {tag: cls for cls, (tag, _) in _KINDS.items()}


def notification_method(notification: NotificationType) -> str:
    """The JSON-RPC method name under which a notification is sent."""
    return _KINDS[type(notification)][1]


def notification_to_dict(notification: NotificationType) -> dict[str, Any]:
    """Encode a notification with its ``type`` tag."""
    body = {k: encode_value(v) for k, v in notification.to_dict().items()}
    return {"type": _KINDS[type(notification)][0], **body}


def notification_from_dict(data: Any) -> NotificationType:
    """Decode a tagged notification."""
    if not isinstance(data, Mapping):
        raise JsonError("notification must be an object")
    cls = _BY_TAG.get(data.get("type"))
    if cls is None:
        raise JsonError(f"unknown notification type: {data.get('type')!r}")
    return cls.from_dict({k: v for k, v in data.items() if k != "type"})