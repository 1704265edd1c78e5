"""
Reducer - Applies actions to round snapshots.

The reducer is the single point of round mutation.
The game loops call Reducer.apply(); apply_action() is a one-off helper
with a throwaway reducer.

Design principles:
- Pure transition: (snapshot, action) -> ActionResult with a new snapshot
- Lenient: misuse (guessing on a finished round, flipping mid-evaluation,
  unknown card ids) is ignored, never raised
- Injectable randomness and clock so tests are reproducible
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Callable, Sequence
import math
import random
import time

from .state import (
    GuessRound, MatchRound, Card, CardFace, Difficulty, RoundStatus,
    HINT_FRACTION, MAX_ATTEMPTS,
)
from .action import Action, ActionType, ActionResult


# Minimum time both faces of a mismatched pair stay visible.
MISMATCH_DELAY_SECONDS = 1.2


@dataclass
class Reducer:
    """
    Reducer applies actions to rounds.

    Stateless apart from its collaborators - all game state is in the
    snapshots. `rng` drives shuffling and hint selection, `clock` stamps
    the start of a mismatch evaluation.
    """
    rng: random.Random = field(default_factory=random.Random)
    clock: Callable[[], float] = time.monotonic
    mismatch_delay: float = MISMATCH_DELAY_SECONDS

    # =========================================================================
    # Round creation
    # =========================================================================

    def start_guess(
        self,
        word: str,
        difficulty: Difficulty = Difficulty.EASY,
        image_url: str | None = None,
        max_attempts: int = MAX_ATTEMPTS,
    ) -> ActionResult:
        """Create a fresh blurry-image round for `word`."""
        word = (word or "").strip()
        if not word:
            return ActionResult.failure("Target word is empty", error_code="EMPTY_WORD")

        round_ = GuessRound(
            target_word=word,
            difficulty=difficulty,
            image_url=image_url,
            max_attempts=max_attempts,
        )
        return ActionResult.success_with_state(
            round_,
            changes=[f"New {difficulty.value} round started"],
        )

    def start_match(self, pairs: Sequence[tuple[str, str]]) -> ActionResult:
        """
        Create a fresh memory round from (word, image_url) pairs.

        Each pair yields a word card and an image card sharing a pair key.
        Blank and repeated words are dropped so that every key is shared by
        exactly two cards.
        """
        cards: list[Card] = []
        seen: set[str] = set()
        for word, image_url in pairs:
            word = (word or "").strip()
            key = word.casefold()
            if not word or key in seen:
                continue
            seen.add(key)
            cards.append(Card(card_id=-1, pair_key=key, face=CardFace.WORD, content=word))
            cards.append(Card(card_id=-1, pair_key=key, face=CardFace.IMAGE, content=image_url or ""))

        if not cards:
            return ActionResult.failure("No usable word pairs", error_code="EMPTY_PAIRS")

        # Ids follow the shuffled position so they say nothing about pairing
        self.rng.shuffle(cards)
        cards = [replace(c, card_id=i) for i, c in enumerate(cards)]
        round_ = MatchRound(cards=tuple(cards))
        return ActionResult.success_with_state(
            round_,
            changes=[f"New memory round with {round_.pair_count} pairs"],
        )

    # =========================================================================
    # Dispatch
    # =========================================================================

    def apply(self, state: GuessRound | MatchRound, action: Action) -> ActionResult:
        """
        Apply an action to a round.

        Returns ActionResult carrying the new (or unchanged) snapshot.
        """
        handler = self._get_handler(state, action.action_type)
        if not handler:
            return ActionResult.ignore(
                state,
                f"{action.action_type.value} does not apply to {type(state).__name__}",
            )
        return handler(state, action)

    def _get_handler(self, state, action_type: ActionType):
        """Get the handler function for an action type on this kind of round."""
        if isinstance(state, GuessRound):
            handlers = {
                ActionType.SUBMIT_GUESS: self._handle_guess,
                ActionType.REQUEST_HINT: self._handle_hint,
            }
        elif isinstance(state, MatchRound):
            handlers = {
                ActionType.FLIP_CARD: self._handle_flip,
                ActionType.RESOLVE_MISMATCH: self._handle_resolve,
            }
        else:
            return None
        return handlers.get(action_type)

    # =========================================================================
    # Blurry-image handlers
    # =========================================================================

    def _handle_guess(self, state: GuessRound, action: Action) -> ActionResult:
        if state.is_terminal:
            return ActionResult.ignore(state, "Round is over")

        guess = (action.payload.guess or "").strip()
        if not guess:
            return ActionResult.ignore(state, "Guess is empty")

        if state.matches(guess):
            new_state = state._copy_with(status=RoundStatus.WON)
            return ActionResult.success_with_state(
                new_state,
                changes=[f"Guessed '{state.target_word}'"],
                outcome=RoundStatus.WON,
            )

        attempts = state.attempts_used + 1
        if attempts >= state.max_attempts:
            new_state = state._copy_with(attempts_used=attempts, status=RoundStatus.LOST)
            return ActionResult.success_with_state(
                new_state,
                changes=[f"Wrong guess '{guess}'", "Out of attempts"],
                outcome=RoundStatus.LOST,
            )

        new_state = state._copy_with(attempts_used=attempts)
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Wrong guess '{guess}'", f"Blur reduced to {new_state.blur_level}px"],
        )

    def _handle_hint(self, state: GuessRound, action: Action) -> ActionResult:
        if state.is_terminal:
            return ActionResult.ignore(state, "Round is over")

        unrevealed = state.unrevealed_indices
        if not unrevealed:
            return ActionResult.ignore(state, "Every letter is already revealed")

        count = math.ceil(len(unrevealed) * HINT_FRACTION)
        picked = self.rng.sample(unrevealed, count)

        new_state = state._copy_with(
            revealed_indices=state.revealed_indices | frozenset(picked),
            hints_used=state.hints_used + 1,
        )
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Revealed {count} letter(s)"],
        )

    # =========================================================================
    # Memory-game handlers
    # =========================================================================

    def _handle_flip(self, state: MatchRound, action: Action) -> ActionResult:
        if state.is_terminal:
            return ActionResult.ignore(state, "Round is over")
        if state.evaluating:
            return ActionResult.ignore(state, "Still showing the last pair")
        if len(state.selected) >= 2:
            return ActionResult.ignore(state, "Two cards are already face-up")

        card = state.get_card(action.payload.card_id)
        if card is None:
            return ActionResult.ignore(state, f"Card {action.payload.card_id} not found")
        if card.is_face_up:
            return ActionResult.ignore(state, f"Card {card.card_id} is already face-up")

        new_state = state.with_cards({card.card_id: card.flipped()})
        new_state = new_state._copy_with(selected=state.selected + (card.card_id,))

        if len(new_state.selected) < 2:
            return ActionResult.success_with_state(
                new_state,
                changes=[f"Flipped card {card.card_id}"],
            )

        return self._evaluate_pair(new_state, action)

    def _evaluate_pair(self, state: MatchRound, action: Action) -> ActionResult:
        """Compare the two selected cards once the second one is face-up."""
        first, second = (state.get_card(cid) for cid in state.selected)
        moves = state.moves + 1

        if first.pair_key == second.pair_key:
            new_state = state.with_cards({
                first.card_id: first.matched(),
                second.card_id: second.matched(),
            })
            new_state = new_state._copy_with(selected=(), moves=moves)
            changes = [f"Matched '{first.pair_key}'"]

            if new_state.all_matched:
                new_state = new_state._copy_with(status=RoundStatus.WON)
                changes.append("All pairs found")
                return ActionResult.success_with_state(
                    new_state, changes=changes, outcome=RoundStatus.WON
                )
            return ActionResult.success_with_state(new_state, changes=changes)

        started = action.timestamp if action.timestamp is not None else self.clock()
        new_state = state._copy_with(
            evaluating=True,
            evaluation_started_at=started,
            moves=moves,
        )
        return ActionResult.success_with_state(
            new_state,
            changes=["No match"],
        )

    def _handle_resolve(self, state: MatchRound, action: Action) -> ActionResult:
        if not state.evaluating:
            return ActionResult.ignore(state, "Nothing to resolve")

        now = action.timestamp if action.timestamp is not None else self.clock()
        elapsed = now - (state.evaluation_started_at or 0.0)
        if elapsed < self.mismatch_delay:
            return ActionResult.ignore(
                state,
                f"Presentation delay not elapsed ({elapsed:.2f}s < {self.mismatch_delay:.2f}s)",
            )

        updated = {}
        for card_id in state.selected:
            card = state.get_card(card_id)
            if card is not None:
                updated[card_id] = card.flipped(False)

        new_state = state.with_cards(updated)._copy_with(
            selected=(),
            evaluating=False,
            evaluation_started_at=None,
        )
        return ActionResult.success_with_state(
            new_state,
            changes=["Cards turned face-down"],
        )


def apply_action(
    state: GuessRound | MatchRound,
    action: Action,
    rng: random.Random | None = None,
) -> ActionResult:
    """
    Convenience function to apply an action with a throwaway reducer.
    """
    reducer = Reducer(rng=rng) if rng is not None else Reducer()
    return reducer.apply(state, action)
