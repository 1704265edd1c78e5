"""
Tests for API schemas and OpenAPI generation.

Tests:
- Schema construction and validation
- Error code contract
- OpenAPI document contents
"""

import pytest
from fastapi.openapi.utils import get_openapi
from pydantic import ValidationError

from ..api.app import create_app
from ..api.schemas import (
    CardInfo,
    DifficultyLevel,
    ErrorCode,
    ErrorResponse,
    FlipRequest,
    GameSessionResponse,
    GameStatus,
    GuessRoundInfo,
    StartBlurryImageRequest,
)
from ..session import LoopState


class TestSchemas:
    """Tests for request/response models."""

    def test_start_request_defaults_to_easy(self):
        assert StartBlurryImageRequest().difficulty == DifficultyLevel.EASY

    def test_unknown_difficulty_rejected(self):
        with pytest.raises(ValidationError):
            StartBlurryImageRequest(difficulty="Impossible")

    def test_flip_request_needs_int(self):
        with pytest.raises(ValidationError):
            FlipRequest(card_id="first")

    def test_face_down_card(self):
        card = CardInfo(card_id=3)
        assert card.content is None
        assert not card.is_flipped

    def test_game_session_response(self):
        response = GameSessionResponse(
            session_id="abc",
            game_type="blurry_image",
            status=GameStatus.PLAYING,
            guess_round=GuessRoundInfo(
                difficulty=DifficultyLevel.EASY,
                masked_word="___",
                word_length=3,
                blur_level=24,
                attempts_used=0,
                max_attempts=3,
                attempts_remaining=3,
                hints_used=0,
                status="playing",
            ),
        )

        data = response.model_dump(mode="json")
        assert data["status"] == "playing"
        assert data["guess_round"]["target_word"] is None
        assert data["match_round"] is None

    def test_error_response(self):
        error = ErrorResponse(error="Session x not found", error_code=ErrorCode.SESSION_NOT_FOUND)
        assert error.model_dump(mode="json")["error_code"] == "SESSION_NOT_FOUND"


class TestErrorCodes:
    """Tests for the error code contract."""

    def test_all_error_codes_defined(self):
        expected = {
            "SESSION_NOT_FOUND",
            "WRONG_GAME_TYPE",
            "CONTENT_UNAVAILABLE",
        }
        assert {code.value for code in ErrorCode} == expected

    def test_game_status_mirrors_loop_state(self):
        assert {s.value for s in GameStatus} == {s.value for s in LoopState}


class TestOpenAPISchema:
    """Tests for OpenAPI schema generation."""

    @pytest.fixture
    def schema(self):
        app = create_app()
        return get_openapi(title=app.title, version=app.version, routes=app.routes)

    def test_openapi_schema_generates(self, schema):
        assert "paths" in schema
        assert "schemas" in schema["components"]

    def test_response_models_in_schema(self, schema):
        schemas = schema["components"]["schemas"]
        for name in [
            "GameSessionResponse",
            "GuessRoundInfo",
            "MatchRoundInfo",
            "ErrorResponse",
            "TranslateResult",
            "PlacementResult",
            "HealthResponse",
        ]:
            assert name in schemas, f"Missing schema: {name}"

    def test_game_endpoints_present(self, schema):
        paths = schema["paths"]

        assert "post" in paths["/api/v1/games/blurry-image"]
        assert "post" in paths["/api/v1/games/blurry-image/{session_id}/guess"]
        assert "post" in paths["/api/v1/games/memory/{session_id}/flip"]
        assert "post" in paths["/api/v1/games/{session_id}/restart"]
        assert {"get", "delete"} <= set(paths["/api/v1/games/{session_id}"])
        assert "404" in paths["/api/v1/games/{session_id}"]["get"]["responses"]
        assert "503" in paths["/api/v1/games/memory"]["post"]["responses"]

    def test_learning_endpoints_present(self, schema):
        paths = schema["paths"]
        for path in [
            "/api/v1/translate",
            "/api/v1/speak",
            "/api/v1/daily/word",
            "/api/v1/daily/sentence",
            "/api/v1/placement-test/questions",
            "/api/v1/placement-test",
            "/api/v1/stories",
            "/api/v1/translation/evaluate",
            "/api/v1/activities/complete",
        ]:
            assert path in paths, f"Missing path: {path}"
