"""
Learning Actions - Server-side entry points for the learning activities.

Each action validates its input, calls one generation flow, and applies
a fixed failure policy: either fall back to built-in content, or return
an explanatory error string next to empty fields. Actions never raise
for provider failures.

User-facing messages are in Portuguese, like the rest of the product.
"""

from __future__ import annotations
from typing import Optional
import logging

from pydantic import BaseModel, Field, ValidationError

from ..content import Flows, GenerationError
from ..content.models import (
    CefrLevel,
    TranslateInput,
    EvaluateTranslationInput,
    EvaluateTranslationOutput,
    TextToSpeechInput,
    DailyWordOutput,
    DailySentenceInput,
    DailySentenceOutput,
    StoryGeneratorInput,
    StoryGeneratorOutput,
    PlacementAnswer,
    PlacementTestInput,
)
from .placement import Question, public_questions


logger = logging.getLogger(__name__)


FALLBACK_DAILY_WORD = DailyWordOutput(word="PANDA", hint="Um urso preto e branco da China.")
FALLBACK_DAILY_SENTENCE = DailySentenceOutput(sentence="The cat is on the table.")
FALLBACK_STORY = StoryGeneratorOutput(
    title="O Dragão Amigável",
    content=(
        "Once upon a time, there was a friendly dragon. He did not breathe fire. "
        "He breathed bubbles! All the children in the village loved to play in his bubbles."
    ),
    level=CefrLevel.A1,
    translation=(
        "Era uma vez um dragão amigável. Ele não cuspia fogo. Ele soprava bolhas! "
        "Todas as crianças da aldeia adoravam brincar em suas bolhas."
    ),
)


# =============================================================================
# Results
# =============================================================================

class TranslateResult(BaseModel):
    translation: str = ""
    explanation: str = ""
    synonyms: list[str] = Field(default_factory=list)
    error: Optional[str] = None


class SpeakResult(BaseModel):
    audio_data: Optional[str] = None
    error: Optional[str] = None


class CompletionResult(BaseModel):
    success: bool = True


class PlacementResult(BaseModel):
    success: bool
    final_level: Optional[CefrLevel] = None
    analysis: Optional[str] = None
    error: Optional[str] = None


class TranslationEvaluationResult(BaseModel):
    evaluation: Optional[EvaluateTranslationOutput] = None
    error: Optional[str] = None


# =============================================================================
# Actions
# =============================================================================

async def translate_text(flows: Flows, text: str, context: str) -> TranslateResult:
    """Translate a word as used in `context`, with explanation and synonyms."""
    if not text or not context:
        return TranslateResult(error="Texto ou contexto inválido.")
    try:
        result = await flows.translate(TranslateInput(text=text, context=context))
    except GenerationError:
        logger.exception("Translation failed for %r", text)
        return TranslateResult(
            error="Não foi possível traduzir a palavra. Por favor, tente novamente mais tarde."
        )
    return TranslateResult(**result.model_dump())


async def speak_text(flows: Flows, text: str) -> SpeakResult:
    """Synthesize `text`; the audio comes back as a data URI."""
    if not text or not text.strip():
        return SpeakResult(error="O texto não pode estar vazio.")
    try:
        result = await flows.text_to_speech(TextToSpeechInput(text=text))
    except GenerationError:
        logger.exception("Speech synthesis failed")
        return SpeakResult(error="Não foi possível gerar o áudio. Por favor, tente novamente.")
    return SpeakResult(audio_data=result.audio_data)


async def complete_activity() -> CompletionResult:
    """
    Record that an activity was completed.

    Progress is not persisted; this always reports success so the
    player never sees an error for it.
    """
    logger.info("Activity completed. Progress is not saved.")
    return CompletionResult(success=True)


async def fetch_daily_word(flows: Flows) -> DailyWordOutput:
    try:
        return await flows.daily_word()
    except GenerationError:
        logger.exception("Daily word generation failed, using fallback")
        return FALLBACK_DAILY_WORD


async def fetch_daily_sentence(flows: Flows, level: CefrLevel = CefrLevel.A1) -> DailySentenceOutput:
    try:
        return await flows.daily_sentence(DailySentenceInput(level=level))
    except GenerationError:
        logger.exception("Daily sentence generation failed, using fallback")
        return FALLBACK_DAILY_SENTENCE


async def get_placement_test_questions() -> list[Question]:
    return public_questions()


async def submit_placement_test(flows: Flows, answers: list[PlacementAnswer]) -> PlacementResult:
    """Ask the AI to place the learner from graded answers."""
    try:
        data = PlacementTestInput(answers=answers)
    except ValidationError as e:
        logger.error("Invalid placement test submission: %s", e)
        return PlacementResult(success=False, error="Dados de envio inválidos.")

    try:
        evaluation = await flows.evaluate_placement_test(data)
    except GenerationError:
        logger.exception("Placement test evaluation failed")
        return PlacementResult(
            success=False,
            error="Não foi possível processar os resultados do seu teste.",
        )

    return PlacementResult(
        success=True,
        final_level=evaluation.final_level,
        analysis=evaluation.analysis,
    )


async def fetch_new_story(flows: Flows, data: StoryGeneratorInput | None = None) -> StoryGeneratorOutput:
    try:
        return await flows.generate_story(data or StoryGeneratorInput())
    except GenerationError:
        logger.exception("Story generation failed, using fallback")
        return FALLBACK_STORY


async def evaluate_user_translation(
    flows: Flows,
    original_text: str | None,
    reference_translation: str | None,
    user_translation: str | None,
) -> TranslationEvaluationResult:
    """Grade a learner's translation against the reference one."""
    try:
        data = EvaluateTranslationInput(
            original_text=original_text or "",
            reference_translation=reference_translation or "",
            user_translation=user_translation or "",
        )
    except ValidationError:
        return TranslationEvaluationResult(error="Dados de entrada inválidos. Tente novamente.")

    try:
        evaluation = await flows.evaluate_translation(data)
    except GenerationError:
        logger.exception("Translation evaluation failed")
        return TranslationEvaluationResult(
            error="Ocorreu um erro ao avaliar sua tradução. Por favor, tente novamente."
        )
    return TranslationEvaluationResult(evaluation=evaluation)
