"""
Session Module - Manages ephemeral game sessions.

A session represents one player at one game:
- Created when the player opens the game
- Holds the game loop and its current round
- Starts new rounds on "play again"
- Destroyed when the player leaves

Sessions are EPHEMERAL: no persistence, no progress saved.
"""

from .manager import SessionManager, Session, GameType
from .game_loop import (
    BlurryImageLoop,
    MemoryGameLoop,
    LoopState,
    TurnResult,
    CompletionNotifier,
)

__all__ = [
    "SessionManager",
    "Session",
    "GameType",
    "BlurryImageLoop",
    "MemoryGameLoop",
    "LoopState",
    "TurnResult",
    "CompletionNotifier",
]
