from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Dict, FrozenSet

from shared.protocol.framing import Channel
from shared.protocol.roles import Role

logger = logging.getLogger(__name__)


class SessionState(StrEnum):
    LISTENING = "listening"
    TOKEN_RECEIVED = "token_received"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    TEXT_RECEIVED = "text_received"
    KEY_RECEIVED = "key_received"
    RESULT_SENT = "result_sent"
    CLOSED = "closed"
    FAILED = "failed"


TERMINAL_STATES: FrozenSet[SessionState] = frozenset({SessionState.CLOSED, SessionState.FAILED})

TRANSITIONS: Dict[SessionState, FrozenSet[SessionState]] = {
    SessionState.LISTENING: frozenset({SessionState.TOKEN_RECEIVED}),
    SessionState.TOKEN_RECEIVED: frozenset({SessionState.ACCEPTED, SessionState.REJECTED}),
    SessionState.ACCEPTED: frozenset({SessionState.TEXT_RECEIVED}),
    SessionState.REJECTED: frozenset({SessionState.CLOSED}),
    SessionState.TEXT_RECEIVED: frozenset({SessionState.KEY_RECEIVED}),
    SessionState.KEY_RECEIVED: frozenset({SessionState.RESULT_SENT}),
    SessionState.RESULT_SENT: frozenset({SessionState.CLOSED}),
    SessionState.CLOSED: frozenset(),
    SessionState.FAILED: frozenset(),
}


@dataclass
class ConnectionContext:
    channel: Channel
    role: Role
    peername: str
    state: SessionState = SessionState.LISTENING
    text_length: int = 0
    key_length: int = 0
    opened_at: float = field(default_factory=time.time)

    def advance(self, state: SessionState) -> None:
        """Move to `state`; FAILED is reachable from any live state."""
        if self.state in TERMINAL_STATES:
            raise RuntimeError(f"session for {self.peername} already {self.state}")
        if state is not SessionState.FAILED and state not in TRANSITIONS[self.state]:
            raise RuntimeError(f"illegal transition {self.state} -> {state} for {self.peername}")
        logger.debug("%s: %s -> %s", self.peername, self.state, state)
        self.state = state

    def is_finished(self) -> bool:
        return self.state in TERMINAL_STATES

    def elapsed(self) -> float:
        return time.time() - self.opened_at
