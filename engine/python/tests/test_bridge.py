"""Tests for the protocol message layer and session bridge."""

import json

import pytest

from api.bridge import SessionBridge
from api.protocol import (
    PROTOCOL_VERSION,
    ErrorCode,
    InputRequest,
    TickRequest,
    parse_message,
)
from upside_core.piece import Piece


@pytest.fixture
def bridge():
    return SessionBridge(seed=42)


def test_parse_message():
    """Test parsing known and unknown message types."""
    message = parse_message({"type": "input", "action": "ROTATE"})
    assert isinstance(message, InputRequest)
    assert message.action == "ROTATE"

    assert isinstance(parse_message({"type": "tick", "delta_ms": 16}), TickRequest)

    with pytest.raises(ValueError):
        parse_message({"type": "teleport"})
    with pytest.raises(ValueError):
        parse_message({"type": "obs", "data": {}})
    with pytest.raises(ValueError):
        parse_message({"type": "input"})
    with pytest.raises(ValueError):
        parse_message(["not", "an", "object"])


def test_hello(bridge):
    """Test hello handshake and version check."""
    [response] = bridge.handle({"type": "hello", "version": PROTOCOL_VERSION})
    assert response["type"] == "hello"
    assert response["server"] == "upside-core-py"

    [error] = bridge.handle({"type": "hello", "version": "s0.0.1"})
    assert error["code"] == ErrorCode.VERSION_MISMATCH


def test_start_input_and_tick(bridge):
    """Test a short session over the bridge."""
    [obs] = bridge.handle({"type": "start"})
    assert obs["type"] == "obs"
    assert obs["info"] == {"event": "start", "ok": True}
    assert obs["data"]["state"] == "RUNNING"

    x = obs["data"]["current"]["x"]
    [obs] = bridge.handle({"type": "input", "action": "MOVE_RIGHT"})
    assert obs["info"]["accepted"]
    assert obs["data"]["current"]["x"] == x + 1

    y = obs["data"]["current"]["y"]
    [obs] = bridge.handle({"type": "tick", "delta_ms": 500})
    assert obs["data"]["current"]["y"] == y - 1


def test_pause_toggle(bridge):
    """Test pause, toggle and resume messages."""
    [obs] = bridge.handle({"type": "pause", "toggle": True})
    assert obs["info"]["ok"] is False, "Nothing to pause before start"
    assert obs["info"]["paused"] is False

    bridge.handle({"type": "start"})

    [obs] = bridge.handle({"type": "pause"})
    assert obs["data"]["state"] == "PAUSED"

    [obs] = bridge.handle({"type": "pause", "toggle": True})
    assert obs["info"]["ok"] is True
    assert obs["info"]["paused"] is False
    assert obs["data"]["state"] == "RUNNING"

    bridge.handle({"type": "pause"})
    [obs] = bridge.handle({"type": "resume"})
    assert obs["info"]["ok"]


def test_invalid_action_is_error(bridge):
    """Test an unknown input action becomes an error response."""
    bridge.handle({"type": "start"})
    [error] = bridge.handle({"type": "input", "action": "JUMP"})
    assert error["type"] == "error"
    assert error["code"] == ErrorCode.INVALID_ACTION


def test_invalid_tick_delta(bridge):
    """Test a non-numeric delta is rejected."""
    [error] = bridge.handle({"type": "tick", "delta_ms": "soon"})
    assert error["code"] == ErrorCode.INVALID_MESSAGE


@pytest.mark.parametrize("delta", ["nan", "inf", float("nan")])
def test_non_finite_tick_delta_rejected(bridge, delta):
    """Test NaN and infinite deltas are rejected and the clock keeps running."""
    [obs] = bridge.handle({"type": "start"})
    y = obs["data"]["current"]["y"]

    [error] = bridge.handle({"type": "tick", "delta_ms": delta})
    assert error["code"] == ErrorCode.INVALID_MESSAGE

    [obs] = bridge.handle({"type": "tick", "delta_ms": 500})
    assert obs["data"]["current"]["y"] == y - 1


def test_nan_literal_in_json_text(bridge):
    """Test the NaN literal accepted by json.loads is rejected as a delta."""
    bridge.handle({"type": "start"})

    [text] = bridge.handle_text('{"type": "tick", "delta_ms": NaN}')

    assert json.loads(text)["code"] == ErrorCode.INVALID_MESSAGE
    assert bridge.session.drop_timer_ms == 0


def test_debug_requires_debug_mode(bridge):
    """Test debug commands are gated on debug mode."""
    [error] = bridge.handle({"type": "debug", "command": "fill_test_rows"})
    assert error["code"] == ErrorCode.DEBUG_DISABLED

    [obs] = bridge.handle({"type": "debug", "command": "toggle"})
    assert obs["data"]["debug_mode"] is True

    bridge.handle({"type": "debug", "command": "fill_test_rows"})
    [obs] = bridge.handle({"type": "debug", "command": "clear_lines"})
    assert obs["data"]["state"] == "CLEARING"
    assert obs["data"]["animation"]["glowing_rows"] == [1, 3]

    [error] = bridge.handle({"type": "debug", "command": "explode"})
    assert error["code"] == ErrorCode.INVALID_MESSAGE


def test_game_over_event_precedes_snapshot(bridge):
    """Test game over notifications are delivered with the final score."""
    session = bridge.session
    bridge.handle({"type": "start"})
    for row in range(12, 20):
        for col in range(1, session.grid.width):
            session.grid.set(row, col, 4)
    session.controller.current = Piece.from_name("O", 0, 5)

    responses = bridge.handle({"type": "input", "action": "HARD_DROP"})

    assert [r["type"] for r in responses] == ["game_over", "obs"]
    assert responses[0]["score"] == 8
    assert responses[1]["data"]["state"] == "NOT_STARTED"


def test_handle_text(bridge):
    """Test JSON text in, JSON text out."""
    [text] = bridge.handle_text(json.dumps({"type": "snapshot"}))
    assert json.loads(text)["type"] == "obs"

    [text] = bridge.handle_text("{not json")
    error = json.loads(text)
    assert error["type"] == "error"
    assert error["code"] == ErrorCode.INVALID_MESSAGE
