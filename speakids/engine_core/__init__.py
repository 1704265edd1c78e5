"""
Engine Core - Deterministic round state for the guessing games.

The engine is the state machine that:
1. Creates rounds (blurry-image and memory-match)
2. Holds immutable round snapshots
3. Applies player actions via the reducer
4. Reports terminal outcomes to the caller, which owns side effects
"""

from .state import (
    GuessRound,
    MatchRound,
    Card,
    CardFace,
    Difficulty,
    RoundStatus,
    MAX_ATTEMPTS,
)
from .action import Action, ActionType, ActionPayload, ActionResult
from .reducer import Reducer, apply_action, MISMATCH_DELAY_SECONDS

__all__ = [
    "GuessRound",
    "MatchRound",
    "Card",
    "CardFace",
    "Difficulty",
    "RoundStatus",
    "MAX_ATTEMPTS",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "Reducer",
    "apply_action",
    "MISMATCH_DELAY_SECONDS",
]
