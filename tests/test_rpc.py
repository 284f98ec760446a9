import json

import pytest

from muxd.errors import JsonError
from muxd.rpc import Notification, Request, Response, RpcError, parse_message


def test_request_defaults():
    req = Request("server_status")
    assert req.to_dict() == {"jsonrpc": "2.0", "id": 0, "method": "server_status", "params": {}}


def test_parse_request_round_trip():
    req = Request("pane.write", {"pane_id": "p"}, id="abc")
    assert parse_message(json.dumps(req.to_dict())) == req


def test_response_success_and_error():
    ok = Response(1, result={"running": True})
    assert not ok.is_error()
    assert parse_message(ok.to_dict()) == ok
    err = Response(2, error=RpcError(-32601, "Method not found"))
    data = err.to_dict()
    assert "data" not in data["error"] and "result" not in data
    parsed = parse_message(data)
    assert parsed.is_error() and parsed.error.code == -32601


def test_notification_parse():
    note = Notification("pane.output", {"data": "x"})
    assert parse_message(note.to_dict()) == note


def test_invalid_json_raises():
    with pytest.raises(JsonError):
        parse_message("{not json")
    with pytest.raises(JsonError):
        parse_message({"foo": 1})
    with pytest.raises(JsonError):
        Response.from_dict({"jsonrpc": "2.0", "id": 1})