"""
Learning Module - The non-game learning activities.

Wraps each generation flow with input validation and a failure policy
(built-in fallback content or an error message), plus the static
placement-test question bank.
"""

from .actions import (
    translate_text,
    speak_text,
    complete_activity,
    fetch_daily_word,
    fetch_daily_sentence,
    get_placement_test_questions,
    submit_placement_test,
    fetch_new_story,
    evaluate_user_translation,
    TranslateResult,
    SpeakResult,
    CompletionResult,
    PlacementResult,
    TranslationEvaluationResult,
)
from .placement import PLACEMENT_QUESTIONS, Question, QuestionOption, grade_answers

__all__ = [
    "translate_text",
    "speak_text",
    "complete_activity",
    "fetch_daily_word",
    "fetch_daily_sentence",
    "get_placement_test_questions",
    "submit_placement_test",
    "fetch_new_story",
    "evaluate_user_translation",
    "TranslateResult",
    "SpeakResult",
    "CompletionResult",
    "PlacementResult",
    "TranslationEvaluationResult",
    "PLACEMENT_QUESTIONS",
    "Question",
    "QuestionOption",
    "grade_answers",
]
