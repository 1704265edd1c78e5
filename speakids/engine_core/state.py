"""
Round State - Immutable snapshots for the guessing games.

Design principles:
- Immutable: snapshots are frozen, every transition returns a new one
- Renderable: derived values (masked word, blur level) live on the snapshot
- Framework-agnostic: no knowledge of HTTP, audio or the AI provider
- Ephemeral: a round lives only as long as the session that owns it
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum


MAX_ATTEMPTS = 3

# Blur radius (pixels) of the image before the first guess, and how much
# each wrong guess removes.
BASE_BLUR = 24
BLUR_STEP = 8

HINT_FRACTION = 0.25


class RoundStatus(Enum):
    """Lifecycle of a single round."""
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


class Difficulty(Enum):
    """Difficulty tiers understood by the content source."""
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class CardFace(Enum):
    """What the front of a memory card shows."""
    WORD = "word"
    IMAGE = "image"


@dataclass(frozen=True)
class GuessRound:
    """
    One round of the blurry-image game.

    The target word never changes during a round. Revealed indices only
    grow, and a terminal round (won or lost) is never mutated again.
    """
    target_word: str
    difficulty: Difficulty = Difficulty.EASY
    image_url: str | None = None

    attempts_used: int = 0
    max_attempts: int = MAX_ATTEMPTS
    revealed_indices: frozenset[int] = field(default_factory=frozenset)
    hints_used: int = 0

    status: RoundStatus = RoundStatus.PLAYING

    @property
    def is_terminal(self) -> bool:
        return self.status != RoundStatus.PLAYING

    @property
    def attempts_remaining(self) -> int:
        return max(0, self.max_attempts - self.attempts_used)

    @property
    def blur_level(self) -> int:
        """Blur radius to render the image with. Presentation only."""
        return max(0, BASE_BLUR - self.attempts_used * BLUR_STEP)

    @property
    def hintable_indices(self) -> tuple[int, ...]:
        """Positions that can ever be revealed (everything but spaces)."""
        return tuple(
            i for i, ch in enumerate(self.target_word) if not ch.isspace()
        )

    @property
    def unrevealed_indices(self) -> list[int]:
        return [i for i in self.hintable_indices if i not in self.revealed_indices]

    @property
    def fully_revealed(self) -> bool:
        return not self.unrevealed_indices

    @property
    def masked_word(self) -> str:
        """Target word with unrevealed letters hidden behind underscores."""
        chars = []
        for i, ch in enumerate(self.target_word):
            if ch.isspace():
                chars.append(" ")
            elif i in self.revealed_indices:
                chars.append(ch.upper())
            else:
                chars.append("_")
        return "".join(chars)

    def matches(self, guess: str) -> bool:
        """Case-insensitive, whitespace-trimmed comparison against the target."""
        return guess.strip().casefold() == self.target_word.strip().casefold()

    def _copy_with(self, **kwargs) -> GuessRound:
        return replace(self, **kwargs)


@dataclass(frozen=True)
class Card:
    """
    A card on the memory-game table.

    Exactly two cards share a pair_key: the word card and its image card.
    """
    card_id: int
    pair_key: str
    face: CardFace
    content: str  # The word itself, or an image URL
    is_flipped: bool = False
    is_matched: bool = False

    @property
    def is_face_up(self) -> bool:
        return self.is_flipped or self.is_matched

    def flipped(self, up: bool = True) -> Card:
        return replace(self, is_flipped=up)

    def matched(self) -> Card:
        return replace(self, is_flipped=True, is_matched=True)


@dataclass(frozen=True)
class MatchRound:
    """
    One round of the memory game.

    `selected` holds at most two face-up, unmatched card ids. While a
    mismatched pair waits out its presentation delay, `evaluating` is set
    and flips are refused.
    """
    cards: tuple[Card, ...]
    selected: tuple[int, ...] = ()

    evaluating: bool = False
    evaluation_started_at: float | None = None

    moves: int = 0
    status: RoundStatus = RoundStatus.PLAYING

    @property
    def is_terminal(self) -> bool:
        return self.status != RoundStatus.PLAYING

    @property
    def pair_count(self) -> int:
        return len(self.cards) // 2

    @property
    def matched_pairs(self) -> int:
        return sum(1 for c in self.cards if c.is_matched) // 2

    @property
    def all_matched(self) -> bool:
        return bool(self.cards) and all(c.is_matched for c in self.cards)

    def get_card(self, card_id: int) -> Card | None:
        """Get a card by ID."""
        for card in self.cards:
            if card.card_id == card_id:
                return card
        return None

    def with_cards(self, updated: dict[int, Card]) -> MatchRound:
        """Return new round with the given cards replaced by ID."""
        new_cards = tuple(updated.get(c.card_id, c) for c in self.cards)
        return self._copy_with(cards=new_cards)

    def _copy_with(self, **kwargs) -> MatchRound:
        return replace(self, **kwargs)
