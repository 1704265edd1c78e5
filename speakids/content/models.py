"""
Flow Models - Typed inputs and outputs of every AI generation flow.

Outputs are validated against these models before anything else sees
them, so an incomplete provider answer fails at the flow boundary.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class CefrLevel(str, Enum):
    """CEFR proficiency levels used across the learning activities."""
    A1 = "A1"
    A2 = "A2"
    B1 = "B1"
    B2 = "B2"
    C1 = "C1"
    C2 = "C2"


# =============================================================================
# Translation
# =============================================================================

class TranslateInput(BaseModel):
    text: str = Field(min_length=1)
    context: str = Field(min_length=1, description="Sentence the word appears in")


class TranslateOutput(BaseModel):
    translation: str = Field(min_length=1)
    explanation: str = Field(min_length=1)
    synonyms: list[str] = Field(min_length=1)


class EvaluateTranslationInput(BaseModel):
    original_text: str = Field(min_length=1)
    reference_translation: str = Field(min_length=1)
    user_translation: str = Field(min_length=1)


class EvaluateTranslationOutput(BaseModel):
    score: int = Field(ge=0, le=100)
    feedback: str
    suggestion: Optional[str] = None


# =============================================================================
# Speech
# =============================================================================

class TextToSpeechInput(BaseModel):
    text: str = Field(min_length=1)


class TextToSpeechOutput(BaseModel):
    audio_data: str = Field(description="data:audio/mpeg;base64,... URI")


# =============================================================================
# Daily content
# =============================================================================

class DailyWordOutput(BaseModel):
    word: str = Field(min_length=1)
    hint: str = Field(min_length=1)


class DailySentenceInput(BaseModel):
    level: CefrLevel = CefrLevel.A1


class DailySentenceOutput(BaseModel):
    sentence: str = Field(min_length=1)
    translation: Optional[str] = None


class StoryGeneratorInput(BaseModel):
    level: CefrLevel = CefrLevel.A1
    topic: Optional[str] = Field(None, description="Optional theme for the story")


class StoryGeneratorOutput(BaseModel):
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    level: CefrLevel
    translation: Optional[str] = None


# =============================================================================
# Placement test
# =============================================================================

class PlacementAnswer(BaseModel):
    question_id: str
    question: str
    level: CefrLevel
    is_correct: bool
    selected_option: str


class PlacementTestInput(BaseModel):
    answers: list[PlacementAnswer] = Field(min_length=1)


class PlacementTestOutput(BaseModel):
    final_level: CefrLevel
    analysis: str = Field(min_length=1)


# =============================================================================
# Game content
# =============================================================================

class Challenge(BaseModel):
    """A word to guess and the picture that depicts it."""
    word: str = Field(min_length=1)
    image_url: str


class MemoryCard(BaseModel):
    word: str = Field(min_length=1)
    image_url: str


class MemoryGameOutput(BaseModel):
    cards: list[MemoryCard] = Field(min_length=1)


class WordList(BaseModel):
    """Intermediate answer for image-backed flows: words first, pictures after."""
    words: list[str] = Field(min_length=1)
