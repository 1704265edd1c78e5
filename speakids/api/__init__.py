"""
API Module - Web client interface.

Exposes the learning activities and games via REST API. The client:
1. Requests translations, speech and daily content
2. Takes the placement test
3. Starts game sessions and sends player input
4. Re-renders from the round snapshot in every response

All game state is session-scoped. No user accounts.
"""

from .schemas import (
    # Requests
    TranslateRequest,
    SpeakRequest,
    PlacementSubmission,
    StoryRequest,
    StartBlurryImageRequest,
    GuessRequest,
    FlipRequest,
    # Responses
    GameSessionResponse,
    GuessRoundInfo,
    MatchRoundInfo,
    CardInfo,
    SessionListResponse,
    EndSessionResponse,
    ErrorResponse,
    HealthResponse,
    # Enums
    ErrorCode,
    GameStatus,
    DifficultyLevel,
)
from .service import APIService
from .app import create_app

__all__ = [
    "TranslateRequest",
    "SpeakRequest",
    "PlacementSubmission",
    "StoryRequest",
    "StartBlurryImageRequest",
    "GuessRequest",
    "FlipRequest",
    "GameSessionResponse",
    "GuessRoundInfo",
    "MatchRoundInfo",
    "CardInfo",
    "SessionListResponse",
    "EndSessionResponse",
    "ErrorResponse",
    "HealthResponse",
    "ErrorCode",
    "GameStatus",
    "DifficultyLevel",
    "APIService",
    "create_app",
]
