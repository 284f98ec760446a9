"""Parameter objects for muxd JSON-RPC methods."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union

from .errors import JsonError
from .types import Payload, PaneSize


@dataclass
class CreateSessionRequest(Payload):
    name: str
    working_dir: str | None = None
    env: dict[str, str] = field(default_factory=dict)
    _omit_none: ClassVar[frozenset] = frozenset({"working_dir"})


@dataclass
class ListSessionsRequest(Payload):
    pass


@dataclass
class DeleteSessionRequest(Payload):
    session_id: str


@dataclass
class CreatePaneRequest(Payload):
    session_id: str
    pane_type: str = "terminal"
    command: str | None = None
    working_dir: str | None = None
    env: dict[str, str] = field(default_factory=dict)
    size: PaneSize | None = None
    _omit_none: ClassVar[frozenset] = frozenset({"command", "working_dir", "size"})
    _decoders: ClassVar[dict] = {"size": PaneSize.from_dict}


@dataclass
class WritePaneRequest(Payload):
    pane_id: str
    data: str


@dataclass
class ResizePaneRequest(Payload):
    pane_id: str
    size: PaneSize
    _decoders: ClassVar[dict] = {"size": PaneSize.from_dict}


class ReadPosition(Enum):
    START = "start"
    END = "end"
    CURSOR = "cursor"


@dataclass
class ReadPaneRequest(Payload):
    """Read request; ``position`` travels as the JSON key ``from``."""

    pane_id: str
    lines: int = 100
    position: ReadPosition = ReadPosition.END

    def to_dict(self) -> dict[str, Any]:
        return {"pane_id": self.pane_id, "lines": self.lines, "from": self.position.value}

    @classmethod
    def from_dict(cls, data: Any) -> "ReadPaneRequest":
        if not isinstance(data, Mapping) or "pane_id" not in data:
            raise JsonError("missing field `pane_id`")
        try:
            position = ReadPosition(data.get("from", "end"))
        except ValueError as exc:
            raise JsonError(str(exc)) from exc
        return cls(data["pane_id"], data.get("lines", 100), position)


@dataclass
class KillPaneRequest(Payload):
    pane_id: str


class SplitDirection(Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass
class PaneLayout:
    pane_id: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "pane", "pane_id": self.pane_id}


@dataclass
class SplitLayout:
    direction: SplitDirection
    ratio: float
    children: list["LayoutNode"] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "split",
            "direction": self.direction.value,
            "ratio": self.ratio,
            "children": [c.to_dict() for c in self.children],
        }


LayoutNode = Union[PaneLayout, SplitLayout]


def parse_layout(data: Any) -> LayoutNode:
    """Decode a layout tree from its tagged JSON form."""
    if not isinstance(data, Mapping):
        raise JsonError("layout must be an object")
    kind = data.get("type")
    try:
        if kind == "pane":
            return PaneLayout(data["pane_id"])
        if kind == "split":
            return SplitLayout(
                SplitDirection(data["direction"]),
                float(data["ratio"]),
                [parse_layout(c) for c in data["children"]],
            )
    except (KeyError, ValueError, TypeError) as exc:
        raise JsonError(f"invalid layout: {exc}") from exc
    raise JsonError(f"unknown layout type: {kind!r}")


@dataclass
class SetLayoutRequest(Payload):
    session_id: str
    layout: LayoutNode
    _decoders: ClassVar[dict] = {"layout": parse_layout}


@dataclass
class SubscribeRequest(Payload):
    events: list[str]


@dataclass
class UnsubscribeRequest(Payload):
    events: list[str]


@dataclass
class UpdatePaneTitleRequest(Payload):
    pane_id: str
    title: str | None = None


@dataclass
class UpdatePaneWorkingDirRequest(Payload):
    pane_id: str
    working_dir: str | None = None


@dataclass
class SearchPaneRequest(Payload):
    pane_id: str
    query: str
    case_sensitive: bool = False
    regex: bool = False
    max_results: int = 100
    start_line: int | None = None
    _omit_none: ClassVar[frozenset] = frozenset({"start_line"})


@dataclass
class SaveStateRequest(Payload):
    session_ids: list[str] | None = None
    _omit_none: ClassVar[frozenset] = frozenset({"session_ids"})


@dataclass
class RestoreStateRequest(Payload):
    session_ids: list[str] | None = None
    restart_commands: bool = False
    _omit_none: ClassVar[frozenset] = frozenset({"session_ids"})