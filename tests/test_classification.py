from datetime import datetime, timedelta, timezone

import pytest

from muxd.classification import (
    CustomPane,
    PaneCategory,
    PaneClassificationInfo,
    PaneClassificationQuery,
    PaneMetadata,
    QueryPanesByClassificationRequest,
    QueryPanesByClassificationResponse,
    TerminalPane,
    UpdatePaneClassificationRequest,
    pane_type_from_json,
    pane_type_to_json,
)
from muxd.errors import JsonError


def _build_pane():
    metadata = PaneMetadata()
    metadata.add_tag("cargo")
    metadata.add_tag("rust")
    metadata.set_attribute("project", "orchflow")
    metadata.priority = 8
    return CustomPane("build-server", PaneCategory.BUILD, metadata)


def test_pane_metadata_tags():
    metadata = PaneMetadata()
    metadata.add_tag("build")
    metadata.add_tag("rust")

    assert metadata.matches_tag("build")
    assert metadata.matches_tag("rust")
    assert not metadata.matches_tag("test")

    assert metadata.matches_any_tag(["build", "test"])
    assert metadata.matches_all_tags(["build", "rust"])
    assert not metadata.matches_all_tags(["build", "test"])

    metadata.remove_tag("rust")
    assert not metadata.matches_tag("rust")


def test_add_tag_is_idempotent():
    metadata = PaneMetadata()
    metadata.add_tag("build")
    metadata.add_tag("build")
    assert metadata.tags == ["build"]


def test_pane_metadata_attributes():
    metadata = PaneMetadata()
    metadata.set_attribute("project", "orchflow")
    metadata.set_attribute("language", "rust")

    assert metadata.get_attribute("project") == "orchflow"
    assert metadata.get_attribute("language") == "rust"
    assert metadata.get_attribute("nonexistent") is None

    metadata.remove_attribute("language")
    assert metadata.get_attribute("language") is None


def test_metadata_defaults():
    metadata = PaneMetadata()
    assert metadata.priority == 5
    assert metadata.auto_restore is False
    assert metadata.tags == []
    assert metadata.modified_at == metadata.created_at


def test_touch_advances_modified_time():
    metadata = PaneMetadata(created_at=datetime(2020, 1, 1, tzinfo=timezone.utc))
    metadata.set_attribute("k", "v")
    assert metadata.modified_at > metadata.created_at


def test_classification_query_matching():
    pane = _build_pane()

    assert PaneClassificationQuery().with_category(PaneCategory.BUILD).matches(pane)
    assert not PaneClassificationQuery().with_category(PaneCategory.TEST).matches(pane)

    assert PaneClassificationQuery().with_tag("cargo").matches(pane)
    assert not PaneClassificationQuery().with_tag("npm").matches(pane)

    assert PaneClassificationQuery().with_attribute("project", "orchflow").matches(pane)
    assert not PaneClassificationQuery().with_attribute("project", "other").matches(pane)

    assert PaneClassificationQuery().with_priority_range(5, 10).matches(pane)
    assert not PaneClassificationQuery().with_priority_range(1, 5).matches(pane)


def test_any_tag_and_auto_restore_filters():
    pane = _build_pane()
    assert PaneClassificationQuery().with_any_tag("npm").with_any_tag("rust").matches(pane)
    assert not PaneClassificationQuery().with_any_tag("npm").matches(pane)
    assert PaneClassificationQuery().with_auto_restore(False).matches(pane)
    assert not PaneClassificationQuery().with_auto_restore(True).matches(pane)


def test_creation_date_filters_are_strict():
    created = datetime(2024, 5, 1, tzinfo=timezone.utc)
    pane = CustomPane("p", PaneCategory.DOCS, PaneMetadata(created_at=created))
    assert not PaneClassificationQuery(created_after=created).matches(pane)
    assert not PaneClassificationQuery(created_before=created).matches(pane)
    assert PaneClassificationQuery(created_after=created - timedelta(days=1)).matches(pane)
    assert PaneClassificationQuery(created_before=created + timedelta(days=1)).matches(pane)


def test_builders_do_not_modify_original():
    base = PaneClassificationQuery()
    derived = base.with_tag("x")
    assert base.tags == []
    assert derived.tags == ["x"]


def test_terminal_pane_matching():
    terminal = TerminalPane()
    assert PaneClassificationQuery().matches(terminal)
    assert not PaneClassificationQuery().with_category(PaneCategory.BUILD).matches(terminal)
    assert PaneClassificationQuery().with_priority_range(9, 10).matches(terminal)


def test_pane_metadata_serialization():
    metadata = PaneMetadata(
        description="Build server for Rust project",
        tags=["build", "rust"],
        attributes={"project": "orchflow"},
        priority=8,
        auto_restore=True,
    )
    restored = PaneMetadata.from_dict(metadata.to_dict())
    assert restored.description == metadata.description
    assert restored.tags == metadata.tags
    assert restored.attributes == metadata.attributes
    assert restored.priority == 8
    assert restored.auto_restore is True
    assert restored.created_at == metadata.created_at


def test_category_json_forms():
    assert PaneCategory.BUILD.to_json() == "build"
    assert PaneCategory("general", custom=True).to_json() == {"custom": "general"}
    assert PaneCategory.from_json("docs") == PaneCategory.DOCS
    assert PaneCategory.from_json({"custom": "ml"}) == PaneCategory("ml", custom=True)
    with pytest.raises(JsonError):
        PaneCategory.from_json("unknown")
    with pytest.raises(ValueError):
        PaneCategory("unknown")


def test_default_custom_pane_category():
    assert CustomPane("p").category == PaneCategory("general", custom=True)


def test_pane_type_json_round_trip():
    assert pane_type_to_json(TerminalPane()) == "terminal"
    assert pane_type_from_json("terminal") == TerminalPane()

    pane = _build_pane()
    encoded = pane_type_to_json(pane)
    assert encoded["custom"]["name"] == "build-server"
    assert encoded["custom"]["category"] == "build"
    assert pane_type_from_json(encoded) == pane


def test_pane_type_from_json_rejects_garbage():
    with pytest.raises(JsonError):
        pane_type_from_json({"custom": {"name": "x"}})
    with pytest.raises(JsonError):
        pane_type_from_json(42)


def test_query_round_trip():
    query = (
        PaneClassificationQuery()
        .with_category(PaneCategory("ml", custom=True))
        .with_tag("a")
        .with_priority_range(2, 7)
        .with_auto_restore(True)
    )
    data = query.to_dict()
    assert data["priority_range"] == [2, 7]
    assert data["category"] == {"custom": "ml"}
    assert PaneClassificationQuery.from_dict(data) == query


def test_request_and_response_round_trip():
    pane = _build_pane()
    update = UpdatePaneClassificationRequest("sess_1", "pane_1", pane)
    assert UpdatePaneClassificationRequest.from_dict(update.to_dict()) == update

    query_request = QueryPanesByClassificationRequest(PaneClassificationQuery().with_tag("x"))
    assert QueryPanesByClassificationRequest.from_dict(query_request.to_dict()) == query_request

    info = PaneClassificationInfo("sess_1", "pane_1", TerminalPane(), True)
    response = QueryPanesByClassificationResponse([info], 1)
    decoded = QueryPanesByClassificationResponse.from_dict(response.to_dict())
    assert decoded.total_count == 1
    assert decoded.panes[0].pane_type == TerminalPane()
    assert decoded.panes[0].is_active is True