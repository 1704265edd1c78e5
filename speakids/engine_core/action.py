"""
Action System - Actions, payloads, and results.

Actions represent:
1. Player input (guess, hint request, card flip)
2. Timed system input (resolving a mismatched pair once its delay elapsed)

All round changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ActionType(Enum):
    """Types of actions in the system."""
    # Blurry-image game
    SUBMIT_GUESS = "submit_guess"
    REQUEST_HINT = "request_hint"

    # Memory game
    FLIP_CARD = "flip_card"
    RESOLVE_MISMATCH = "resolve_mismatch"


@dataclass
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types use different fields.
    Validation happens in the reducer.
    """
    guess: str | None = None
    card_id: int | None = None


@dataclass
class Action:
    """
    A complete action to be applied to a round.

    `timestamp` is a clock reading in seconds. The reducer reads the
    current time from its own clock when it is missing.
    """
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)
    timestamp: float | None = None

    @classmethod
    def guess(cls, text: str) -> Action:
        """Factory for a guess submission."""
        return cls(
            action_type=ActionType.SUBMIT_GUESS,
            payload=ActionPayload(guess=text),
        )

    @classmethod
    def hint(cls) -> Action:
        """Factory for a hint request."""
        return cls(action_type=ActionType.REQUEST_HINT)

    @classmethod
    def flip(cls, card_id: int, timestamp: float | None = None) -> Action:
        """Factory for flipping a memory card."""
        return cls(
            action_type=ActionType.FLIP_CARD,
            payload=ActionPayload(card_id=card_id),
            timestamp=timestamp,
        )

    @classmethod
    def resolve(cls, timestamp: float | None = None) -> Action:
        """Factory for turning a mismatched pair back face-down."""
        return cls(action_type=ActionType.RESOLVE_MISMATCH, timestamp=timestamp)


@dataclass
class ActionResult:
    """
    Result of applying an action.

    `new_state` is always set: ignored actions carry the unchanged
    snapshot, so callers that only re-render can read it unconditionally.
    `outcome` is set only on the action that ended the round.
    """
    success: bool
    new_state: Any | None = None  # GuessRound or MatchRound
    error: str | None = None
    error_code: str | None = None

    # For UI/presentation
    state_changes: list[str] = field(default_factory=list)
    outcome: Any | None = None  # RoundStatus.WON / LOST on terminal transition

    @property
    def ignored(self) -> bool:
        return self.error_code == "IGNORED"

    @classmethod
    def failure(cls, error: str, error_code: str | None = None, state: Any = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, new_state=state, error=error, error_code=error_code)

    @classmethod
    def ignore(cls, state: Any, reason: str) -> ActionResult:
        """Create a no-op result that keeps the current snapshot."""
        return cls(success=False, new_state=state, error=reason, error_code="IGNORED")

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
        outcome: Any | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            state_changes=changes or [],
            outcome=outcome,
        )
