"""Core value types shared by the muxd protocol."""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import MISSING, dataclass, fields
from datetime import datetime
from enum import Enum
from typing import Any, Callable, ClassVar

from .errors import JsonError


def encode_datetime(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")


def decode_datetime(value: Any) -> datetime:
    if not isinstance(value, str):
        raise JsonError(f"invalid timestamp: {value!r}")
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise JsonError(str(exc)) from exc


def encode_value(value: Any) -> Any:
    if isinstance(value, Payload):
        return value.to_dict()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return encode_datetime(value)
    if hasattr(value, "to_json"):
        return value.to_json()
    if isinstance(value, (list, tuple)):
        return [encode_value(v) for v in value]
    if isinstance(value, dict):
        return {k: encode_value(v) for k, v in value.items()}
    return value


class Payload:
    """Mixin for dataclasses that travel as JSON objects."""

    _omit_none: ClassVar[frozenset] = frozenset()
    _decoders: ClassVar[dict[str, Callable[[Any], Any]]] = {}

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None and f.name in self._omit_none:
                continue
            out[f.name] = encode_value(value)
        return out

    @classmethod
    def from_dict(cls, data: Any):
        if not isinstance(data, Mapping):
            raise JsonError(f"expected an object for {cls.__name__}")
        kwargs: dict[str, Any] = {}
        for f in fields(cls):
            if f.name in data:
                value = data[f.name]
                decoder = cls._decoders.get(f.name)
                if decoder is not None and value is not None:
                    try:
                        value = decoder(value)
                    except (ValueError, TypeError, KeyError) as exc:
                        raise JsonError(f"invalid `{f.name}`: {exc}") from exc
                kwargs[f.name] = value
            elif f.default is MISSING and f.default_factory is MISSING:
                raise JsonError(f"missing field `{f.name}`")
        return cls(**kwargs)


@dataclass
class PaneSize(Payload):
    rows: int = 24
    cols: int = 80


@dataclass(frozen=True)
class PaneType:
    """A terminal pane, or a custom pane when ``custom`` names its kind."""

    custom: str | None = None

    def to_json(self) -> Any:
        return "terminal" if self.custom is None else {"custom": self.custom}

    def __str__(self) -> str:
        return "terminal" if self.custom is None else self.custom


def parse_pane_type(value: Any) -> PaneType:
    """Decode a pane type from its JSON form."""
    if value == "terminal":
        return PaneType()
    if isinstance(value, Mapping) and len(value) == 1 and isinstance(value.get("custom"), str):
        return PaneType(value["custom"])
    raise JsonError(f"unknown pane type: {value!r}")


def new_session_id() -> str:
    return f"sess_{uuid.uuid4().hex}"


def new_pane_id() -> str:
    return f"pane_{uuid.uuid4().hex}"


@dataclass
class AuthToken(Payload):
    token: str
    expires_at: datetime | None = None
    _decoders: ClassVar[dict] = {"expires_at": decode_datetime}


@dataclass
class MuxdConfig(Payload):
    port: int = 7890
    unix_socket: str | None = None
    max_sessions: int = 100
    max_panes_per_session: int = 50
    output_buffer_size: int = 64 * 1024
    auth_enabled: bool = False
    log_level: str = "info"
    data_dir: str = "~/.muxd"