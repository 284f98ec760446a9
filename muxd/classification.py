"""Pane classification: categories, rich metadata and queries over them."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, ClassVar, Union

from .errors import JsonError
from .types import Payload, decode_datetime


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class PaneCategory:
    """A predefined pane category, or a custom one when ``custom`` is set."""

    name: str
    custom: bool = False

    PREDEFINED: ClassVar[tuple] = (
        "build",
        "test",
        "agent",
        "debug",
        "server",
        "monitor",
        "database",
        "docs",
    )
    BUILD: ClassVar["PaneCategory"]
    TEST: ClassVar["PaneCategory"]
    AGENT: ClassVar["PaneCategory"]
    DEBUG: ClassVar["PaneCategory"]
    SERVER: ClassVar["PaneCategory"]
    MONITOR: ClassVar["PaneCategory"]
    DATABASE: ClassVar["PaneCategory"]
    DOCS: ClassVar["PaneCategory"]

    def __post_init__(self) -> None:
        if not self.custom and self.name not in self.PREDEFINED:
            raise ValueError(f"unknown pane category: {self.name!r}")

    def to_json(self) -> Any:
        return {"custom": self.name} if self.custom else self.name

    @classmethod
    def from_json(cls, value: Any) -> "PaneCategory":
        if isinstance(value, str) and value in cls.PREDEFINED:
            return cls(value)
        if (
            isinstance(value, Mapping)
            and len(value) == 1
            and isinstance(value.get("custom"), str)
        ):
            return cls(value["custom"], custom=True)
        raise JsonError(f"unknown pane category: {value!r}")


PaneCategory.BUILD = PaneCategory("build")
PaneCategory.TEST = PaneCategory("test")
PaneCategory.AGENT = PaneCategory("agent")
PaneCategory.DEBUG = PaneCategory("debug")
PaneCategory.SERVER = PaneCategory("server")
PaneCategory.MONITOR = PaneCategory("monitor")
PaneCategory.DATABASE = PaneCategory("database")
PaneCategory.DOCS = PaneCategory("docs")

_DEFAULT_CATEGORY = PaneCategory("general", custom=True)


@dataclass
class PaneMetadata(Payload):
    """Descriptive metadata attached to a custom pane."""

    description: str | None = None
    tags: list[str] = field(default_factory=list)
    attributes: dict[str, str] = field(default_factory=dict)
    created_at: datetime | None = None
    modified_at: datetime | None = None
    priority: int = 5
    auto_restore: bool = False
    restore_command: str | None = None
    environment: dict[str, str] = field(default_factory=dict)
    working_directory: str | None = None
    _decoders: ClassVar[dict] = {
        "created_at": decode_datetime,
        "modified_at": decode_datetime,
    }

    def __post_init__(self) -> None:
        if self.created_at is None:
            self.created_at = _now()
        if self.modified_at is None:
            self.modified_at = self.created_at

    def to_dict(self) -> dict[str, Any]:
        """Encode the metadata to its JSON object form."""
        return super().to_dict()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PaneMetadata":
        """Decode metadata from its JSON object form."""
        return super().from_dict(data)

    def touch(self) -> None:
        """Mark the metadata as modified now."""
        self.modified_at = _now()

    def add_tag(self, tag: str) -> None:
        if tag not in self.tags:
            self.tags.append(tag)
            self.touch()

    def remove_tag(self, tag: str) -> None:
        if tag in self.tags:
            self.tags.remove(tag)
            self.touch()

    def set_attribute(self, key: str, value: str) -> None:
        self.attributes[key] = value
        self.touch()

    def remove_attribute(self, key: str) -> None:
        if self.attributes.pop(key, None) is not None:
            self.touch()

    def matches_tag(self, tag: str) -> bool:
        return tag in self.tags

    def matches_any_tag(self, tags) -> bool:
        return any(self.matches_tag(tag) for tag in tags)

    def matches_all_tags(self, tags) -> bool:
        return all(self.matches_tag(tag) for tag in tags)

    def get_attribute(self, key: str) -> str | None:
        return self.attributes.get(key)


@dataclass(frozen=True)
class TerminalPane:
    """A plain terminal pane without classification."""

    def to_json(self) -> Any:
        return "terminal"


@dataclass
class CustomPane:
    """A named, categorised pane carrying metadata."""

    name: str
    category: PaneCategory = _DEFAULT_CATEGORY
    metadata: PaneMetadata = field(default_factory=PaneMetadata)

    def to_json(self) -> Any:
        return {
            "custom": {
                "name": self.name,
                "category": self.category.to_json(),
                "metadata": self.metadata.to_dict(),
            }
        }


EnhancedPaneType = Union[TerminalPane, CustomPane]


def pane_type_to_json(pane_type: EnhancedPaneType) -> Any:
    """Encode an enhanced pane type to its JSON form."""
    return pane_type.to_json()


def pane_type_from_json(value: Any) -> EnhancedPaneType:
    """Decode an enhanced pane type from its JSON form."""
    if value == "terminal":
        return TerminalPane()
    if isinstance(value, Mapping) and len(value) == 1 and isinstance(value.get("custom"), Mapping):
        body = value["custom"]
        for key in ("name", "category", "metadata"):
            if key not in body:
                raise JsonError(f"missing field `{key}`")
        if not isinstance(body["name"], str):
            raise JsonError("pane name must be a string")
        return CustomPane(
            body["name"],
            PaneCategory.from_json(body["category"]),
            PaneMetadata.from_dict(body["metadata"]),
        )
    raise JsonError(f"unknown pane type: {value!r}")


def _decode_range(value: Any) -> tuple[int, int]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValueError("priority range must hold two values")
    return int(value[0]), int(value[1])


@dataclass
class PaneClassificationQuery(Payload):
    """Filter over pane classifications; an empty query matches every pane."""

    category: PaneCategory | None = None
    tags: list[str] = field(default_factory=list)
    any_tags: list[str] = field(default_factory=list)
    attributes: dict[str, str] = field(default_factory=dict)
    priority_range: tuple[int, int] | None = None
    auto_restore: bool | None = None
    created_after: datetime | None = None
    created_before: datetime | None = None
    _decoders: ClassVar[dict] = {
        "category": PaneCategory.from_json,
        "priority_range": _decode_range,
        "created_after": decode_datetime,
        "created_before": decode_datetime,
    }

    def with_category(self, category: PaneCategory) -> "PaneClassificationQuery":
        return replace(self, category=category)

    def with_tag(self, tag: str) -> "PaneClassificationQuery":
        return replace(self, tags=[*self.tags, tag])

    def with_any_tag(self, tag: str) -> "PaneClassificationQuery":
        return replace(self, any_tags=[*self.any_tags, tag])

    def with_attribute(self, key: str, value: str) -> "PaneClassificationQuery":
        return replace(self, attributes={**self.attributes, key: value})

    def with_priority_range(self, minimum: int, maximum: int) -> "PaneClassificationQuery":
        return replace(self, priority_range=(minimum, maximum))

    def with_auto_restore(self, auto_restore: bool) -> "PaneClassificationQuery":
        return replace(self, auto_restore=auto_restore)

    def matches(self, pane_type: EnhancedPaneType) -> bool:
        """Whether the given pane type satisfies every criterion of this query."""
        if isinstance(pane_type, TerminalPane):
            return (
                self.category is None
                and not self.tags
                and not self.any_tags
                and not self.attributes
            )

        metadata = pane_type.metadata
        if self.category is not None and pane_type.category != self.category:
            return False
        if self.tags and not metadata.matches_all_tags(self.tags):
            return False
        if self.any_tags and not metadata.matches_any_tag(self.any_tags):
            return False
        if any(metadata.get_attribute(k) != v for k, v in self.attributes.items()):
            return False
        if self.priority_range is not None:
            low, high = self.priority_range
            if not low <= metadata.priority <= high:
                return False
        if self.auto_restore is not None and metadata.auto_restore != self.auto_restore:
            return False
        if self.created_after is not None and metadata.created_at <= self.created_after:
            return False
        if self.created_before is not None and metadata.created_at >= self.created_before:
            return False
        return True


@dataclass
class UpdatePaneClassificationRequest(Payload):
    session_id: str
    pane_id: str
    pane_type: EnhancedPaneType
    _decoders: ClassVar[dict] = {"pane_type": pane_type_from_json}


@dataclass
class QueryPanesByClassificationRequest(Payload):
    query: PaneClassificationQuery
    session_id: str | None = None
    _decoders: ClassVar[dict] = {"query": PaneClassificationQuery.from_dict}


@dataclass
class PaneClassificationInfo(Payload):
    session_id: str
    pane_id: str
    pane_type: EnhancedPaneType
    is_active: bool
    last_activity: datetime | None = None
    _decoders: ClassVar[dict] = {
        "pane_type": pane_type_from_json,
        "last_activity": decode_datetime,
    }


@dataclass
class QueryPanesByClassificationResponse(Payload):
    panes: list[PaneClassificationInfo]
    total_count: int
    _decoders: ClassVar[dict] = {
        "panes": lambda v: [PaneClassificationInfo.from_dict(x) for x in v],
    }