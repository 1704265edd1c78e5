"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between the web client and the
service. Game responses never disclose the target word, or the content
of a face-down card, while a round is in play.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has expired
- WRONG_GAME_TYPE: Action sent to a session of the other game
- CONTENT_UNAVAILABLE: The AI could not produce round content
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from ..content.models import StoryGeneratorInput


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    WRONG_GAME_TYPE = "WRONG_GAME_TYPE"
    CONTENT_UNAVAILABLE = "CONTENT_UNAVAILABLE"


class GameStatus(str, Enum):
    """Loop state as seen by the client."""
    IDLE = "idle"
    LOADING = "loading"
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"
    ERROR = "error"


class DifficultyLevel(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


# =============================================================================
# Learning requests
# =============================================================================

class TranslateRequest(BaseModel):
    text: str = Field(description="Word or expression to translate")
    context: str = Field(description="Sentence the word appears in")


class SpeakRequest(BaseModel):
    text: str


class PlacementSubmission(BaseModel):
    """Selected option per question: {"a1-g1": "a", ...}."""
    selections: dict[str, str] = Field(default_factory=dict)


class StoryRequest(StoryGeneratorInput):
    pass


# =============================================================================
# Game requests
# =============================================================================

class StartBlurryImageRequest(BaseModel):
    difficulty: DifficultyLevel = DifficultyLevel.EASY


class GuessRequest(BaseModel):
    guess: str


class FlipRequest(BaseModel):
    card_id: int


# =============================================================================
# Game responses
# =============================================================================

class GuessRoundInfo(BaseModel):
    """Blurry-image round as rendered by the client."""
    difficulty: DifficultyLevel
    image_url: Optional[str] = None
    masked_word: str
    word_length: int
    blur_level: int = Field(description="Blur radius in pixels to apply to the image")
    attempts_used: int
    max_attempts: int
    attempts_remaining: int
    hints_used: int
    revealed_indices: list[int] = Field(default_factory=list)
    hints_exhausted: bool = False
    status: str
    target_word: Optional[str] = Field(None, description="Only set once the round is over")


class CardInfo(BaseModel):
    """A memory card; content is hidden while face-down."""
    card_id: int
    face: Optional[str] = Field(None, description="word or image, when face-up")
    content: Optional[str] = None
    is_flipped: bool = False
    is_matched: bool = False


class MatchRoundInfo(BaseModel):
    """Memory round as rendered by the client."""
    cards: list[CardInfo] = Field(default_factory=list)
    selected: list[int] = Field(default_factory=list)
    evaluating: bool = False
    moves: int = 0
    pair_count: int = 0
    matched_pairs: int = 0
    status: str


class GameSessionResponse(BaseModel):
    """Snapshot of a game session after an operation."""
    session_id: str
    game_type: str
    status: GameStatus
    guess_round: Optional[GuessRoundInfo] = None
    match_round: Optional[MatchRoundInfo] = None
    changes: list[str] = Field(default_factory=list)
    outcome: Optional[str] = None
    rejected: Optional[str] = Field(None, description="Why the last input was ignored")
    error: Optional[str] = Field(None, description="Collaborator failure, e.g. content unavailable")


class SessionListResponse(BaseModel):
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    success: bool
    session_id: str


# =============================================================================
# Shared responses
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error envelope."""
    error: str
    error_code: ErrorCode
    details: Optional[dict] = None


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    ai_configured: bool = False
