"""
API Service - Business logic layer between the HTTP API and the engine.

The service:
1. Routes learning requests to the learning actions
2. Manages game sessions
3. Converts round snapshots into client-safe responses

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable

from .. import learning
from ..content import Flows
from ..content.models import (
    CefrLevel,
    DailySentenceOutput,
    DailyWordOutput,
    StoryGeneratorInput,
    StoryGeneratorOutput,
)
from ..engine_core import Difficulty, GuessRound, MatchRound, Reducer
from ..session import GameType, Session, SessionManager, TurnResult, BlurryImageLoop
from .. import config
from .schemas import (
    CardInfo,
    DifficultyLevel,
    ErrorCode,
    ErrorResponse,
    GameSessionResponse,
    GameStatus,
    GuessRoundInfo,
    MatchRoundInfo,
)


def _default_reducer() -> Reducer:
    return Reducer(mismatch_delay=max(config.MISMATCH_DELAY_SECONDS, 1.0))


@dataclass
class APIService:
    """
    Main API service for the web client.

    Usage:
        service = APIService()

        # Learning activities
        result = await service.translate("bark", "Dogs bark at night.")

        # Games
        response = await service.start_blurry_image(DifficultyLevel.EASY)
        response = await service.submit_guess(response.session_id, "dragon")
    """
    flows: Flows = field(default_factory=Flows)
    session_manager: SessionManager | None = None
    reducer_factory: Callable[[], Reducer] = _default_reducer

    def __post_init__(self):
        if self.session_manager is None:
            self.session_manager = SessionManager(
                content_source=self.flows,
                notifier=learning.complete_activity,
                reducer_factory=self.reducer_factory,
                max_age_seconds=config.SESSION_MAX_AGE_SECONDS,
            )

    # =========================================================================
    # Learning activities
    # =========================================================================

    async def translate(self, text: str, context: str) -> learning.TranslateResult:
        return await learning.translate_text(self.flows, text, context)

    async def speak(self, text: str) -> learning.SpeakResult:
        return await learning.speak_text(self.flows, text)

    async def complete_activity(self) -> learning.CompletionResult:
        return await learning.complete_activity()

    async def daily_word(self) -> DailyWordOutput:
        return await learning.fetch_daily_word(self.flows)

    async def daily_sentence(self, level: CefrLevel = CefrLevel.A1) -> DailySentenceOutput:
        return await learning.fetch_daily_sentence(self.flows, level)

    async def placement_questions(self) -> list[learning.Question]:
        return await learning.get_placement_test_questions()

    async def submit_placement_test(self, selections: dict[str, str]) -> learning.PlacementResult:
        answers = learning.grade_answers(selections)
        return await learning.submit_placement_test(self.flows, answers)

    async def story(self, data: StoryGeneratorInput | None = None) -> StoryGeneratorOutput:
        return await learning.fetch_new_story(self.flows, data)

    async def evaluate_translation(
        self,
        original_text: str | None,
        reference_translation: str | None,
        user_translation: str | None,
    ) -> learning.TranslationEvaluationResult:
        return await learning.evaluate_user_translation(
            self.flows, original_text, reference_translation, user_translation
        )

    # =========================================================================
    # Games
    # =========================================================================

    async def start_blurry_image(self, difficulty: DifficultyLevel) -> GameSessionResponse:
        """Create a blurry-image session and start its first round."""
        session = self.session_manager.create_session(GameType.BLURRY_IMAGE)
        turn = await session.loop.start(Difficulty(difficulty.value))
        return self._to_response(session, turn)

    async def start_memory_game(self) -> GameSessionResponse:
        """Create a memory-game session and start its first round."""
        session = self.session_manager.create_session(GameType.MEMORY_GAME)
        turn = await session.loop.start()
        return self._to_response(session, turn)

    async def restart(self, session_id: str) -> GameSessionResponse | ErrorResponse:
        """Play again: replace the session's round with a fresh one."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        session.touch()
        if isinstance(session.loop, BlurryImageLoop):
            turn = await session.loop.restart()
        else:
            turn = await session.loop.start()
        return self._to_response(session, turn)

    async def submit_guess(self, session_id: str, guess: str) -> GameSessionResponse | ErrorResponse:
        session = self._get_game(session_id, GameType.BLURRY_IMAGE)
        if isinstance(session, ErrorResponse):
            return session
        turn = await session.loop.submit_guess(guess)
        return self._to_response(session, turn)

    async def request_hint(self, session_id: str) -> GameSessionResponse | ErrorResponse:
        session = self._get_game(session_id, GameType.BLURRY_IMAGE)
        if isinstance(session, ErrorResponse):
            return session
        turn = await session.loop.request_hint()
        return self._to_response(session, turn)

    async def flip_card(self, session_id: str, card_id: int) -> GameSessionResponse | ErrorResponse:
        session = self._get_game(session_id, GameType.MEMORY_GAME)
        if isinstance(session, ErrorResponse):
            return session
        turn = await session.loop.flip(card_id)
        return self._to_response(session, turn)

    def get_game(self, session_id: str) -> GameSessionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._to_response(session)

    def end_game(self, session_id: str, reason: str = "user_ended") -> bool:
        return self.session_manager.end_session(session_id, reason)

    def list_games(self) -> list[str]:
        self.session_manager.cleanup_stale_sessions()
        return self.session_manager.list_active_sessions()

    # =========================================================================
    # Helpers
    # =========================================================================

    def _not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )

    def _get_game(self, session_id: str, game_type: GameType) -> Session | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        if session.game_type != game_type:
            return ErrorResponse(
                error=f"Session {session_id} is a {session.game_type.value} session",
                error_code=ErrorCode.WRONG_GAME_TYPE,
            )
        session.touch()
        return session

    def _to_response(self, session: Session, turn: TurnResult | None = None) -> GameSessionResponse:
        loop = session.loop
        round_ = loop.round
        return GameSessionResponse(
            session_id=session.session_id,
            game_type=session.game_type.value,
            status=GameStatus(loop.loop_state.value),
            guess_round=_guess_info(round_) if isinstance(round_, GuessRound) else None,
            match_round=_match_info(round_) if isinstance(round_, MatchRound) else None,
            changes=turn.changes if turn else [],
            outcome=turn.outcome.value if turn and turn.outcome else None,
            rejected=turn.rejected if turn else None,
            error=loop.error,
        )


def _guess_info(round_: GuessRound) -> GuessRoundInfo:
    return GuessRoundInfo(
        difficulty=DifficultyLevel(round_.difficulty.value),
        image_url=round_.image_url,
        masked_word=round_.masked_word,
        word_length=len(round_.target_word),
        blur_level=round_.blur_level,
        attempts_used=round_.attempts_used,
        max_attempts=round_.max_attempts,
        attempts_remaining=round_.attempts_remaining,
        hints_used=round_.hints_used,
        revealed_indices=sorted(round_.revealed_indices),
        hints_exhausted=round_.fully_revealed,
        status=round_.status.value,
        target_word=round_.target_word if round_.is_terminal else None,
    )


def _match_info(round_: MatchRound) -> MatchRoundInfo:
    return MatchRoundInfo(
        cards=[
            CardInfo(
                card_id=c.card_id,
                face=c.face.value if c.is_face_up else None,
                content=c.content if c.is_face_up else None,
                is_flipped=c.is_flipped,
                is_matched=c.is_matched,
            )
            for c in round_.cards
        ],
        selected=list(round_.selected),
        evaluating=round_.evaluating,
        moves=round_.moves,
        pair_count=round_.pair_count,
        matched_pairs=round_.matched_pairs,
        status=round_.status.value,
    )
