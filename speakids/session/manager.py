"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. Player opens a game -> session created with a fresh loop
2. Loop fetches content and starts a round
3. Player guesses / flips; the loop updates the round
4. "Play again" starts a new round in the same session
5. Player leaves -> session destroyed, ALL state deleted

PERSISTENCE RULES:
- NO database: sessions live in memory only
- Nothing survives a restart; progress saving is a no-op
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import logging
import time
import uuid

from ..content import ContentSource
from ..engine_core import Reducer
from .game_loop import (
    BlurryImageLoop,
    CompletionNotifier,
    LoopState,
    MemoryGameLoop,
)


logger = logging.getLogger(__name__)


class GameType(Enum):
    """Games a session can host."""
    BLURRY_IMAGE = "blurry_image"
    MEMORY_GAME = "memory_game"


@dataclass
class Session:
    """
    An ephemeral game session.

    Contains:
    - The game loop (which owns the current round)

    The session is destroyed when the player leaves.
    State is NOT persisted.
    """
    session_id: str
    game_type: GameType
    loop: BlurryImageLoop | MemoryGameLoop
    created_at: float
    last_active_at: float = 0.0

    def is_active(self) -> bool:
        """Active while a round is loading or in play."""
        return self.loop.loop_state in {
            LoopState.IDLE,
            LoopState.LOADING,
            LoopState.PLAYING,
        }

    def touch(self) -> None:
        self.last_active_at = time.time()


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions wired to the shared content source and notifier
    - Track sessions by ID
    - Clean up abandoned sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(
        self,
        content_source: ContentSource,
        notifier: CompletionNotifier | None = None,
        reducer_factory=Reducer,
        max_age_seconds: int = 3600,
    ):
        self.content_source = content_source
        self.notifier = notifier
        self.reducer_factory = reducer_factory
        self.max_age_seconds = max_age_seconds
        self._sessions: dict[str, Session] = {}

    def create_session(self, game_type: GameType) -> Session:
        """
        Create a new game session.

        The loop is created IDLE; the caller starts the first round.
        Abandoned sessions are swept first so the map stays bounded.
        """
        self.cleanup_stale_sessions(self.max_age_seconds)
        session_id = str(uuid.uuid4())
        loop_cls = BlurryImageLoop if game_type == GameType.BLURRY_IMAGE else MemoryGameLoop
        loop = loop_cls(
            self.content_source,
            notifier=self.notifier,
            reducer=self.reducer_factory(),
        )

        now = time.time()
        session = Session(
            session_id=session_id,
            game_type=game_type,
            loop=loop,
            created_at=now,
            last_active_at=now,
        )
        self._sessions[session_id] = session
        logger.info("Created %s session %s", game_type.value, session_id)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and clean up.

        Returns False if the session did not exist.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False

        if isinstance(session.loop, MemoryGameLoop):
            session.loop.close()
        session.loop.round = None
        logger.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def list_sessions(self) -> list[Session]:
        return list(self._sessions.values())

    def cleanup_stale_sessions(self, max_age_seconds: int | None = None) -> int:
        """
        Remove sessions idle for longer than max_age.

        Runs on every new session and on listing. Returns how many were removed.
        """
        if max_age_seconds is None:
            max_age_seconds = self.max_age_seconds
        current_time = time.time()
        to_remove = [
            session_id
            for session_id, session in self._sessions.items()
            if current_time - session.last_active_at > max_age_seconds
        ]

        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return len(to_remove)
