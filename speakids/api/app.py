"""
FastAPI Application - REST API for the SpeaKids web client.

Endpoints:
    POST   /api/v1/translate                     Translate a word in context
    POST   /api/v1/speak                         Text-to-speech
    GET    /api/v1/daily/word                    Word of the day
    GET    /api/v1/daily/sentence                Sentence of the day
    GET    /api/v1/placement-test/questions      Placement test questions
    POST   /api/v1/placement-test                Submit placement test
    POST   /api/v1/stories                       Generate a short story
    POST   /api/v1/translation/evaluate          Grade a translation (form)
    POST   /api/v1/activities/complete           Mark an activity completed
    POST   /api/v1/games/blurry-image            Start blurry-image game
    POST   /api/v1/games/blurry-image/{id}/guess Submit a guess
    POST   /api/v1/games/blurry-image/{id}/hint  Reveal some letters
    POST   /api/v1/games/memory                  Start memory game
    POST   /api/v1/games/memory/{id}/flip        Flip a card
    POST   /api/v1/games/{id}/restart            Play again
    GET    /api/v1/games                         List active games
    GET    /api/v1/games/{id}                    Current game snapshot
    DELETE /api/v1/games/{id}                    End a game

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Optional, Union
import logging

from fastapi import Body, FastAPI, Form, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__, config
from ..content.models import (
    CefrLevel,
    DailySentenceOutput,
    DailyWordOutput,
    StoryGeneratorOutput,
)
from ..learning import (
    CompletionResult,
    PlacementResult,
    Question,
    SpeakResult,
    TranslateResult,
    TranslationEvaluationResult,
)
from .service import APIService
from .schemas import (
    # Request models
    TranslateRequest,
    SpeakRequest,
    PlacementSubmission,
    StoryRequest,
    StartBlurryImageRequest,
    GuessRequest,
    FlipRequest,
    # Response models
    GameSessionResponse,
    SessionListResponse,
    EndSessionResponse,
    ErrorResponse,
    HealthResponse,
    # Enums
    ErrorCode,
    GameStatus,
)


logger = logging.getLogger(__name__)


def create_app(service: Optional[APIService] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="SpeaKids API",
        description="""
Language-learning activities and games for children.

## Games

Both games are session based. Start a game to receive a `session_id`,
then send player input to the session endpoints. Every response carries
the full round snapshot:

- `rejected` is set when an input was ignored (empty guess, round over,
  flipping while the last pair is still showing)
- `error` is set when the AI could not produce round content; call
  `/restart` to retry

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `WRONG_GAME_TYPE` | Action belongs to the other game |
| `CONTENT_UNAVAILABLE` | The AI could not produce round content |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService()

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def game_response(response) -> Union[GameSessionResponse, JSONResponse]:
        """Map service errors onto HTTP status codes."""
        if isinstance(response, ErrorResponse):
            status_code = 404 if response.error_code == ErrorCode.SESSION_NOT_FOUND else 409
            return make_error_response(response.error_code, response.error, status_code=status_code)
        return response

    def started_response(response: GameSessionResponse) -> Union[GameSessionResponse, JSONResponse]:
        """A game whose content failed to load still exists; report 503 with its id."""
        if response.status == GameStatus.ERROR:
            return make_error_response(
                ErrorCode.CONTENT_UNAVAILABLE,
                response.error or "Content unavailable",
                status_code=503,
                details={"session_id": response.session_id},
            )
        return response

    # =========================================================================
    # Learning Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/translate",
        response_model=TranslateResult,
        tags=["Learning"],
        summary="Translate a word in context",
    )
    async def translate(body: TranslateRequest) -> TranslateResult:
        """
        Translate a word as used in a sentence.

        On failure the fields are empty and `error` explains why.
        """
        return await api_service.translate(body.text, body.context)

    @app.post(
        "/api/v1/speak",
        response_model=SpeakResult,
        tags=["Learning"],
        summary="Read text aloud",
    )
    async def speak(body: SpeakRequest) -> SpeakResult:
        """Returns `audio_data` as a `data:audio/mpeg;base64,...` URI, or `error`."""
        return await api_service.speak(body.text)

    @app.get(
        "/api/v1/daily/word",
        response_model=DailyWordOutput,
        tags=["Learning"],
        summary="Word of the day",
    )
    async def daily_word() -> DailyWordOutput:
        return await api_service.daily_word()

    @app.get(
        "/api/v1/daily/sentence",
        response_model=DailySentenceOutput,
        tags=["Learning"],
        summary="Sentence of the day",
    )
    async def daily_sentence(
        level: Annotated[CefrLevel, Query(description="CEFR level")] = CefrLevel.A1,
    ) -> DailySentenceOutput:
        return await api_service.daily_sentence(level)

    @app.get(
        "/api/v1/placement-test/questions",
        response_model=list[Question],
        tags=["Placement Test"],
        summary="Placement test questions",
    )
    async def placement_questions() -> list[Question]:
        """The question bank, without the correct answers."""
        return await api_service.placement_questions()

    @app.post(
        "/api/v1/placement-test",
        response_model=PlacementResult,
        tags=["Placement Test"],
        summary="Submit placement test answers",
    )
    async def submit_placement_test(body: PlacementSubmission) -> PlacementResult:
        """
        Grade the selected options and get a CEFR level.

        **Request Body:**
        ```json
        {"selections": {"a1-g1": "a", "a2-g1": "b"}}
        ```
        """
        return await api_service.submit_placement_test(body.selections)

    @app.post(
        "/api/v1/stories",
        response_model=StoryGeneratorOutput,
        tags=["Learning"],
        summary="Generate a short story",
    )
    async def new_story(body: Annotated[Optional[StoryRequest], Body()] = None) -> StoryGeneratorOutput:
        return await api_service.story(body)

    @app.post(
        "/api/v1/translation/evaluate",
        response_model=TranslationEvaluationResult,
        tags=["Learning"],
        summary="Grade a learner's translation",
    )
    async def evaluate_translation(
        original_text: Annotated[Optional[str], Form()] = None,
        reference_translation: Annotated[Optional[str], Form()] = None,
        user_translation: Annotated[Optional[str], Form()] = None,
    ) -> TranslationEvaluationResult:
        return await api_service.evaluate_translation(
            original_text, reference_translation, user_translation
        )

    @app.post(
        "/api/v1/activities/complete",
        response_model=CompletionResult,
        tags=["Learning"],
        summary="Mark an activity as completed",
    )
    async def complete_activity() -> CompletionResult:
        """Progress is not persisted; this always succeeds."""
        return await api_service.complete_activity()

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games/blurry-image",
        response_model=GameSessionResponse,
        responses={503: {"model": ErrorResponse, "description": "Content unavailable"}},
        tags=["Games"],
        summary="Start a blurry-image game",
    )
    async def start_blurry_image(
        body: Annotated[Optional[StartBlurryImageRequest], Body()] = None,
    ) -> Union[GameSessionResponse, JSONResponse]:
        body = body or StartBlurryImageRequest()
        return started_response(await api_service.start_blurry_image(body.difficulty))

    @app.post(
        "/api/v1/games/blurry-image/{session_id}/guess",
        response_model=GameSessionResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Submit a guess",
    )
    async def submit_guess(session_id: str, body: GuessRequest) -> Union[GameSessionResponse, JSONResponse]:
        return game_response(await api_service.submit_guess(session_id, body.guess))

    @app.post(
        "/api/v1/games/blurry-image/{session_id}/hint",
        response_model=GameSessionResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Reveal some letters",
    )
    async def request_hint(session_id: str) -> Union[GameSessionResponse, JSONResponse]:
        return game_response(await api_service.request_hint(session_id))

    @app.post(
        "/api/v1/games/memory",
        response_model=GameSessionResponse,
        responses={503: {"model": ErrorResponse, "description": "Content unavailable"}},
        tags=["Games"],
        summary="Start a memory game",
    )
    async def start_memory_game() -> Union[GameSessionResponse, JSONResponse]:
        return started_response(await api_service.start_memory_game())

    @app.post(
        "/api/v1/games/memory/{session_id}/flip",
        response_model=GameSessionResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Flip a card",
    )
    async def flip_card(session_id: str, body: FlipRequest) -> Union[GameSessionResponse, JSONResponse]:
        return game_response(await api_service.flip_card(session_id, body.card_id))

    @app.post(
        "/api/v1/games/{session_id}/restart",
        response_model=GameSessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Play again",
    )
    async def restart(session_id: str) -> Union[GameSessionResponse, JSONResponse]:
        return game_response(await api_service.restart(session_id))

    @app.get(
        "/api/v1/games",
        response_model=SessionListResponse,
        tags=["Games"],
        summary="List active games",
    )
    async def list_games() -> SessionListResponse:
        sessions = api_service.list_games()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/games/{session_id}",
        response_model=GameSessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Get game snapshot",
    )
    async def get_game(session_id: str) -> Union[GameSessionResponse, JSONResponse]:
        return game_response(api_service.get_game(session_id))

    @app.delete(
        "/api/v1/games/{session_id}",
        response_model=EndSessionResponse,
        tags=["Games"],
        summary="End a game",
    )
    async def end_game(
        session_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndSessionResponse:
        success = api_service.end_game(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="speakids",
            version=__version__,
            ai_configured=api_service.flows.client.is_configured,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "SpeaKids API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn speakids.api.app:app
app = create_app()
