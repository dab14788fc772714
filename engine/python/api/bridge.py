"""Message dispatcher between a presentation layer and one GameSession.

The bridge speaks the JSON messages defined in api.protocol but owns no
transport: hand it a decoded message (or raw text) and send back whatever it
returns.
"""

import json
import logging
import math
from typing import Any, Dict, List, Optional

from upside_core.session import GameOverEvent, GameSession
from api.protocol import (
    PROTOCOL_VERSION,
    DebugCommand,
    DebugRequest,
    ErrorCode,
    ErrorResponse,
    GameOverResponse,
    HelloRequest,
    HelloResponse,
    InputRequest,
    ObservationResponse,
    PauseRequest,
    ResetRequest,
    ResumeRequest,
    SnapshotRequest,
    StartRequest,
    TickRequest,
    parse_message,
    to_dict,
)

logger = logging.getLogger(__name__)


class SessionBridge:
    """Routes protocol messages to a single session."""

    def __init__(self, session: Optional[GameSession] = None, seed: Optional[int] = None):
        """Initialize the bridge.

        Args:
            session: Session to drive (a new one is created if None)
            seed: Seed for the created session
        """
        self.session = session if session is not None else GameSession(seed=seed)
        self._pending: List[GameOverResponse] = []
        self.session.add_game_over_listener(self._on_game_over)

    def _on_game_over(self, event: GameOverEvent) -> None:
        self._pending.append(GameOverResponse(score=event.score, level=event.level, lines=event.lines))

    def _observation(self, info: Dict[str, Any]) -> ObservationResponse:
        return ObservationResponse(data=self.session.snapshot().to_dict(), info=info)

    def _error(self, code: str, message: str) -> Dict[str, Any]:
        return to_dict(ErrorResponse(code=code, message=message))

    def handle(self, data: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Handle one decoded message.

        Args:
            data: JSON message dict

        Returns:
            Response dicts in send order; game over notifications raised while
            handling come before the snapshot
        """
        try:
            message = parse_message(data)
        except ValueError as e:
            return [self._error(ErrorCode.INVALID_MESSAGE, str(e))]

        session = self.session

        if isinstance(message, HelloRequest):
            if message.version != PROTOCOL_VERSION:
                return [self._error(
                    ErrorCode.VERSION_MISMATCH,
                    f"Client version {message.version} != {PROTOCOL_VERSION}",
                )]
            return [to_dict(HelloResponse())]

        if isinstance(message, StartRequest):
            response = self._observation({"event": "start", "ok": session.start()})

        elif isinstance(message, PauseRequest):
            if message.toggle:
                was_paused = session.paused
                ok = session.toggle_pause() != was_paused
            else:
                ok = session.pause()
            response = self._observation({"event": "pause", "ok": ok, "paused": session.paused})

        elif isinstance(message, ResumeRequest):
            response = self._observation({"event": "resume", "ok": session.resume()})

        elif isinstance(message, ResetRequest):
            session.reset()
            response = self._observation({"event": "reset", "ok": True})

        elif isinstance(message, InputRequest):
            try:
                accepted = session.handle_input(message.action)
            except ValueError as e:
                return [self._error(ErrorCode.INVALID_ACTION, str(e))]
            response = self._observation(
                {"event": "input", "accepted": accepted, "events": list(session.events)}
            )

        elif isinstance(message, TickRequest):
            try:
                delta_ms = float(message.delta_ms)
            except (TypeError, ValueError):
                delta_ms = math.nan
            if not math.isfinite(delta_ms):
                return [self._error(ErrorCode.INVALID_MESSAGE, f"Invalid delta_ms: {message.delta_ms!r}")]
            events = session.tick(delta_ms)
            response = self._observation({"event": "tick", "events": list(events)})

        elif isinstance(message, SnapshotRequest):
            response = self._observation({"event": "snapshot"})

        elif isinstance(message, DebugRequest):
            error = self._handle_debug(message.command)
            if error:
                return [error]
            response = self._observation({"event": "debug", "command": message.command})

        else:
            return [self._error(ErrorCode.INVALID_MESSAGE, f"Unknown message type: {type(message)}")]

        responses = [to_dict(r) for r in self._pending]
        self._pending = []
        responses.append(to_dict(response))
        return responses

    def _handle_debug(self, command: str) -> Optional[Dict[str, Any]]:
        try:
            cmd = DebugCommand(command)
        except ValueError:
            return self._error(ErrorCode.INVALID_MESSAGE, f"Unknown debug command: {command}")

        session = self.session
        if cmd is DebugCommand.TOGGLE:
            session.toggle_debug()
            return None
        if not session.debug_mode:
            return self._error(ErrorCode.DEBUG_DISABLED, "Debug mode is off")

        logger.info(f"[Bridge] Debug command: {cmd.value}")
        if cmd is DebugCommand.FILL_TEST_ROWS:
            session.fill_test_rows()
        elif cmd is DebugCommand.FILL_RANDOM:
            session.fill_random_test_pattern()
        else:
            session.trigger_line_clear()
        return None

    def handle_text(self, text: str) -> List[str]:
        """Handle one raw JSON message and return JSON-encoded responses."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            return [json.dumps(self._error(ErrorCode.INVALID_MESSAGE, f"Invalid JSON: {str(e)}"))]
        return [json.dumps(response) for response in self.handle(data)]
