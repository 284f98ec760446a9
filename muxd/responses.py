"""Result objects returned by muxd JSON-RPC methods."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar

from .types import Payload, decode_datetime


@dataclass
class CreateSessionResponse(Payload):
    session_id: str
    name: str
    created_at: datetime
    _decoders: ClassVar[dict] = {"created_at": decode_datetime}


@dataclass
class SessionInfo(Payload):
    session_id: str
    name: str
    pane_count: int
    created_at: datetime
    updated_at: datetime
    _decoders: ClassVar[dict] = {"created_at": decode_datetime, "updated_at": decode_datetime}


@dataclass
class ListSessionsResponse(Payload):
    sessions: list[SessionInfo] = field(default_factory=list)
    _decoders: ClassVar[dict] = {"sessions": lambda v: [SessionInfo.from_dict(x) for x in v]}


@dataclass
class CreatePaneResponse(Payload):
    pane_id: str
    session_id: str
    pane_type: str
    pid: int | None = None
    _omit_none: ClassVar[frozenset] = frozenset({"pid"})


@dataclass
class CursorPosition(Payload):
    row: int
    col: int


@dataclass
class ReadPaneResponse(Payload):
    data: str
    cursor: CursorPosition | None = None
    _omit_none: ClassVar[frozenset] = frozenset({"cursor"})
    _decoders: ClassVar[dict] = {"cursor": CursorPosition.from_dict}


@dataclass
class SuccessResponse(Payload):
    success: bool = True
    message: str | None = None
    _omit_none: ClassVar[frozenset] = frozenset({"message"})


@dataclass
class PaneInfo(Payload):
    pane_id: str
    session_id: str
    pane_type: str
    rows: int
    cols: int
    pid: int | None = None
    title: str | None = None
    working_dir: str | None = None
    _omit_none: ClassVar[frozenset] = frozenset({"pid", "title", "working_dir"})


@dataclass
class GetPaneInfoResponse(Payload):
    pane: PaneInfo
    _decoders: ClassVar[dict] = {"pane": PaneInfo.from_dict}


@dataclass
class ListPanesResponse(Payload):
    panes: list[PaneInfo] = field(default_factory=list)
    _decoders: ClassVar[dict] = {"panes": lambda v: [PaneInfo.from_dict(x) for x in v]}


@dataclass
class SearchMatch(Payload):
    line_number: int
    line_content: str
    match_start: int
    match_end: int


@dataclass
class SearchPaneResponse(Payload):
    matches: list[SearchMatch]
    total_matches: int
    truncated: bool
    _decoders: ClassVar[dict] = {"matches": lambda v: [SearchMatch.from_dict(x) for x in v]}


@dataclass
class VersionResponse(Payload):
    version: str
    protocol_version: str
    features: list[str] = field(default_factory=list)


@dataclass
class SaveStateResponse(Payload):
    saved_sessions: list[str]
    state_file: str


@dataclass
class FailedRestore(Payload):
    session_id: str
    reason: str


@dataclass
class RestoreStateResponse(Payload):
    restored_sessions: list[SessionInfo]
    failed_sessions: list[FailedRestore]
    _decoders: ClassVar[dict] = {
        "restored_sessions": lambda v: [SessionInfo.from_dict(x) for x in v],
        "failed_sessions": lambda v: [FailedRestore.from_dict(x) for x in v],
    }