"""
Game Loop - Drives one guessing-game round against its collaborators.

The loop:
1. Asks the content source for round material
2. Starts a round through the reducer
3. Feeds player input to the reducer
4. Schedules the mismatch presentation delay (memory game)
5. Notifies the completion collaborator once per won round

The reducer stays pure; every side effect lives here. Content failures
become an ERROR loop state with a message, never an exception.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable
import asyncio
import logging

from ..content import ContentSource, GenerationError
from ..engine_core import (
    Action,
    ActionResult,
    Difficulty,
    GuessRound,
    MatchRound,
    Reducer,
    RoundStatus,
)


logger = logging.getLogger(__name__)

CompletionNotifier = Callable[[], Awaitable[Any]]
Sleeper = Callable[[float], Awaitable[Any]]


class LoopState(Enum):
    """State of the game loop."""
    IDLE = "idle"
    LOADING = "loading"
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"
    ERROR = "error"


_OUTCOME_TO_STATE = {
    RoundStatus.PLAYING: LoopState.PLAYING,
    RoundStatus.WON: LoopState.WON,
    RoundStatus.LOST: LoopState.LOST,
}


@dataclass
class TurnResult:
    """
    Result of one loop operation.

    `round` is the current snapshot (None before the first successful
    start). `error` carries collaborator failures; `rejected` carries the
    reason an input was ignored.
    """
    success: bool
    loop_state: LoopState
    round: GuessRound | MatchRound | None = None
    changes: list[str] = field(default_factory=list)
    outcome: RoundStatus | None = None
    error: str | None = None
    rejected: str | None = None


async def _no_op_notifier() -> None:
    return None


class _BaseLoop:
    """Shared plumbing: reducer, notifier, state bookkeeping."""

    def __init__(
        self,
        content_source: ContentSource,
        notifier: CompletionNotifier | None = None,
        reducer: Reducer | None = None,
    ):
        self.content_source = content_source
        self.notifier = notifier or _no_op_notifier
        self.reducer = reducer or Reducer()
        self.round: GuessRound | MatchRound | None = None
        self.loop_state = LoopState.IDLE
        self.error: str | None = None

    def _result(self, result: ActionResult | None = None, success: bool = True) -> TurnResult:
        return TurnResult(
            success=success,
            loop_state=self.loop_state,
            round=self.round,
            changes=list(result.state_changes) if result else [],
            outcome=result.outcome if result else None,
            error=self.error,
            rejected=result.error if result and result.ignored else None,
        )

    def _fail_start(self, message: str) -> TurnResult:
        self.round = None
        self.loop_state = LoopState.ERROR
        self.error = message
        return self._result(success=False)

    async def _apply(self, action: Action) -> TurnResult:
        if self.round is None:
            return TurnResult(
                success=False,
                loop_state=self.loop_state,
                error=self.error,
                rejected="No round in progress",
            )

        result = self.reducer.apply(self.round, action)
        self.round = result.new_state
        self.loop_state = _OUTCOME_TO_STATE[self.round.status]

        if result.outcome == RoundStatus.WON:
            await self._notify_completed()
        return self._result(result, success=result.success)

    async def _notify_completed(self) -> None:
        """Best-effort: a failing notifier is logged, never surfaced."""
        try:
            await self.notifier()
        except Exception:
            logger.warning("Activity completion notifier failed", exc_info=True)


class BlurryImageLoop(_BaseLoop):
    """
    Loop for the blurry-image game.

    Usage:
        loop = BlurryImageLoop(flows, notifier=complete_activity)
        await loop.start(Difficulty.EASY)
        result = await loop.submit_guess("dragon")
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.difficulty: Difficulty | None = None

    async def start(self, difficulty: Difficulty) -> TurnResult:
        """Fetch a challenge and start a new round. Replaces any current round."""
        self.difficulty = difficulty
        self.round = None
        self.error = None
        self.loop_state = LoopState.LOADING

        try:
            challenge = await self.content_source.generate_challenge(difficulty.value)
        except GenerationError as e:
            logger.error("Failed to load %s challenge: %s", difficulty.value, e)
            return self._fail_start("Falha ao carregar desafio")

        result = self.reducer.start_guess(
            challenge.word, difficulty=difficulty, image_url=challenge.image_url
        )
        if not result.success:
            logger.error("Challenge rejected: %s", result.error)
            return self._fail_start("Falha ao carregar desafio")

        self.round = result.new_state
        self.loop_state = LoopState.PLAYING
        return self._result(result)

    async def restart(self) -> TurnResult:
        """Play again at the last difficulty."""
        return await self.start(self.difficulty or Difficulty.EASY)

    async def submit_guess(self, guess: str) -> TurnResult:
        return await self._apply(Action.guess(guess))

    async def request_hint(self) -> TurnResult:
        return await self._apply(Action.hint())


class MemoryGameLoop(_BaseLoop):
    """
    Loop for the memory game.

    After a mismatched pair, a background task waits the reducer's
    mismatch delay and then turns the pair face-down. Flips arriving in
    the meantime are ignored by the reducer.
    """

    def __init__(self, *args, sleep: Sleeper = asyncio.sleep, **kwargs):
        super().__init__(*args, **kwargs)
        self._sleep = sleep
        self._pending: asyncio.Task | None = None

    async def start(self) -> TurnResult:
        """Fetch card pairs and start a new round. Replaces any current round."""
        self._cancel_pending()
        self.round = None
        self.error = None
        self.loop_state = LoopState.LOADING

        try:
            content = await self.content_source.generate_memory_cards()
        except GenerationError as e:
            logger.error("Failed to load memory game cards: %s", e)
            return self._fail_start("Não foi possível carregar um novo jogo.")

        result = self.reducer.start_match([(c.word, c.image_url) for c in content.cards])
        if not result.success:
            logger.error("Memory game cards rejected: %s", result.error)
            return self._fail_start("Não foi possível carregar um novo jogo.")

        self.round = result.new_state
        self.loop_state = LoopState.PLAYING
        return self._result(result)

    async def flip(self, card_id: int) -> TurnResult:
        turn = await self._apply(Action.flip(card_id))
        if isinstance(self.round, MatchRound) and self.round.evaluating and self._pending is None:
            self._pending = asyncio.create_task(self._resolve_after_delay())
        return turn

    async def settle(self) -> None:
        """Wait for a pending mismatch resolution, if any."""
        if self._pending is not None:
            await self._pending

    async def _resolve_after_delay(self) -> None:
        try:
            # Sleep can wake a hair early; retry until the reducer accepts.
            while isinstance(self.round, MatchRound) and self.round.evaluating:
                started = self.round.evaluation_started_at or 0.0
                remaining = self.reducer.mismatch_delay - (self.reducer.clock() - started)
                await self._sleep(max(remaining, 0.01))
                await self._apply(Action.resolve())
        finally:
            if self._pending is asyncio.current_task():
                self._pending = None

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def close(self) -> None:
        """Drop any scheduled work; the round is discarded with the loop."""
        self._cancel_pending()
