"""
Placement Test - Static question bank and answer grading.

Fifteen multiple-choice questions, three per level from A1 to C1.
Correctness is decided here; the AI only turns graded answers into a
final level and an analysis.
"""

from typing import Optional
from pydantic import BaseModel, Field

from ..content.models import CefrLevel, PlacementAnswer


class QuestionOption(BaseModel):
    id: str
    text: str


class Question(BaseModel):
    id: str
    level: CefrLevel
    skill: str = Field(description="Grammar, Vocabulary or Reading")
    question: str
    options: list[QuestionOption]
    correct_option: Optional[str] = None

    def option_text(self, option_id: str) -> Optional[str]:
        for option in self.options:
            if option.id == option_id:
                return option.text
        return None


def _q(qid: str, level: str, skill: str, question: str, options: list[str], correct: str) -> Question:
    return Question(
        id=qid,
        level=CefrLevel(level),
        skill=skill,
        question=question,
        options=[QuestionOption(id=oid, text=text) for oid, text in zip("abc", options)],
        correct_option=correct,
    )


PLACEMENT_QUESTIONS: list[Question] = [
    # A1
    _q("a1-g1", "A1", "Grammar", "I ___ happy.", ["am", "is", "are"], "a"),
    _q("a1-v1", "A1", "Vocabulary", 'Which word means "mesa" in English?',
       ["Table", "Chair", "Door"], "a"),
    _q("a1-r1", "A1", "Reading",
       'Read the text: "This is my dog. He is big." What size is the dog?',
       ["Big", "Small", "It is a cat"], "a"),

    # A2
    _q("a2-g1", "A2", "Grammar", "She ___ to school every day.",
       ["go", "goes", "is going"], "b"),
    _q("a2-v1", "A2", "Vocabulary", "Where can you borrow books?",
       ["Library", "Hospital", "Market"], "a"),
    _q("a2-v2", "A2", "Vocabulary", 'What is the opposite of "hot"?',
       ["Warm", "Cold", "Cool"], "b"),

    # B1
    _q("b1-g1", "B1", "Grammar", "Yesterday we ___ a great movie.",
       ["saw", "seen", "see"], "a"),
    _q("b1-r1", "B1", "Reading",
       'Read the text: "The train was delayed because of heavy rain." Why was the train late?',
       ["Because of strong rain", "Mechanical failure", "Free coffee"], "a"),
    _q("b1-v1", "B1", "Vocabulary", 'Which word is a synonym for "help"?',
       ["Assist", "Avoid", "Argue"], "a"),

    # B2
    _q("b2-g1", "B2", "Grammar", "If I ___ more time, I would travel the world.",
       ["had", "have", "would have"], "a"),
    _q("b2-v1", "B2", "Vocabulary", 'Which is a more formal word for "start"?',
       ["Commence", "Open", "Create"], "a"),
    _q("b2-g2", "B2", "Grammar", "By the time we arrived, the movie ___ already started.",
       ["has", "had", "was"], "b"),

    # C1
    _q("c1-v1", "C1", "Vocabulary", 'The word "ubiquitous" means:',
       ["Rare and hard to find",
        "Present, appearing, or found everywhere",
        "Powerful and influential"], "b"),
    _q("c1-g1", "C1", "Grammar", "Choose the correct sentence:",
       ["Had I known you were coming, I would have baked a cake.",
        "If I would have known you were coming, I had baked a cake.",
        "If I knew you were coming, I baked a cake."], "a"),
    _q("c1-r1", "C1", "Reading", 'What does the idiom "to beat around the bush" mean?',
       ["To speak directly and to the point.",
        "To work hard on a gardening project.",
        "To avoid talking about the main topic."], "c"),
]

_BY_ID = {q.id: q for q in PLACEMENT_QUESTIONS}


def public_questions() -> list[Question]:
    """The question bank with the answers stripped out."""
    return [q.model_copy(update={"correct_option": None}) for q in PLACEMENT_QUESTIONS]


def grade_answers(selections: dict[str, str]) -> list[PlacementAnswer]:
    """
    Turn {question_id: option_id} into graded answers.

    Unknown question ids and unknown options are skipped.
    """
    answers = []
    for question_id, option_id in selections.items():
        question = _BY_ID.get(question_id)
        if question is None:
            continue
        option_text = question.option_text(option_id)
        if option_text is None:
            continue
        answers.append(PlacementAnswer(
            question_id=question.id,
            question=question.question,
            level=question.level,
            is_correct=option_id == question.correct_option,
            selected_option=option_text,
        ))
    return answers
