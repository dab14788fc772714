"""Protocol data classes for presentation-layer messages.

Messages are plain JSON objects with a "type" field. The transport that
carries them (a browser bridge, a test harness, a pipe) is up to the caller.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Literal
from enum import Enum

PROTOCOL_VERSION = "u1.0.0"


class MessageType(str, Enum):
    """Message types."""
    HELLO = "hello"
    START = "start"
    PAUSE = "pause"
    RESUME = "resume"
    RESET = "reset"
    INPUT = "input"
    TICK = "tick"
    SNAPSHOT = "snapshot"
    DEBUG = "debug"
    OBS = "obs"
    GAME_OVER = "game_over"
    ERROR = "error"


class DebugCommand(str, Enum):
    """Debug commands; all but TOGGLE require debug mode."""
    TOGGLE = "toggle"
    FILL_TEST_ROWS = "fill_test_rows"
    FILL_RANDOM = "fill_random"
    CLEAR_LINES = "clear_lines"


@dataclass
class HelloRequest:
    """Client hello message."""
    type: Literal["hello"] = "hello"
    version: str = PROTOCOL_VERSION


@dataclass
class HelloResponse:
    """Hello response."""
    type: Literal["hello"] = "hello"
    version: str = PROTOCOL_VERSION
    server: str = "upside-core-py"


@dataclass
class StartRequest:
    type: Literal["start"] = "start"


@dataclass
class PauseRequest:
    """Pause, or toggle when toggle is set (the single pause/resume button)."""
    toggle: bool = False
    type: Literal["pause"] = "pause"


@dataclass
class ResumeRequest:
    type: Literal["resume"] = "resume"


@dataclass
class ResetRequest:
    """Request to reset the game."""
    type: Literal["reset"] = "reset"


@dataclass
class InputRequest:
    """Player input."""
    action: str  # MOVE_LEFT, MOVE_RIGHT, MOVE_TOWARD_LOCK, ROTATE, HARD_DROP
    type: Literal["input"] = "input"


@dataclass
class TickRequest:
    """Advance the session clock."""
    delta_ms: float
    type: Literal["tick"] = "tick"


@dataclass
class SnapshotRequest:
    type: Literal["snapshot"] = "snapshot"


@dataclass
class DebugRequest:
    command: str
    type: Literal["debug"] = "debug"


@dataclass
class ObservationResponse:
    """Session snapshot response."""
    data: Dict[str, Any]  # Snapshot dict from GameSession.snapshot().to_dict()
    info: Dict[str, Any]
    type: Literal["obs"] = "obs"


@dataclass
class GameOverResponse:
    """Game over notification."""
    score: int
    level: int
    lines: int
    type: Literal["game_over"] = "game_over"


@dataclass
class ErrorResponse:
    """Error response."""
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None
    type: Literal["error"] = "error"


class ErrorCode:
    """Standard error codes."""
    INVALID_MESSAGE = "INVALID_MESSAGE"
    INVALID_ACTION = "INVALID_ACTION"
    DEBUG_DISABLED = "DEBUG_DISABLED"
    VERSION_MISMATCH = "VERSION_MISMATCH"


MESSAGE_CLASSES = {
    MessageType.HELLO: HelloRequest,
    MessageType.START: StartRequest,
    MessageType.PAUSE: PauseRequest,
    MessageType.RESUME: ResumeRequest,
    MessageType.RESET: ResetRequest,
    MessageType.INPUT: InputRequest,
    MessageType.TICK: TickRequest,
    MessageType.SNAPSHOT: SnapshotRequest,
    MessageType.DEBUG: DebugRequest,
}


def parse_message(data: Dict[str, Any]) -> Any:
    """Parse an incoming message.

    Args:
        data: JSON message dict

    Returns:
        Parsed message object

    Raises:
        ValueError: If message type is unknown or fields don't match
    """
    if not isinstance(data, dict):
        raise ValueError(f"Message must be an object, got {type(data).__name__}")

    msg_type = data.get("type")
    try:
        cls = MESSAGE_CLASSES[MessageType(msg_type)]
    except (ValueError, KeyError):
        raise ValueError(f"Unknown message type: {msg_type}")

    try:
        return cls(**data)
    except TypeError as e:
        raise ValueError(f"Malformed {msg_type} message: {e}")


def to_dict(obj: Any) -> Dict[str, Any]:
    """Convert dataclass to dict for JSON serialization.

    Args:
        obj: Dataclass instance

    Returns:
        Dictionary representation
    """
    return asdict(obj)
