"""
Flow Prompts - Prompts sent to the AI provider by each flow.

Every chat prompt asks for a single JSON object whose shape matches the
flow's output model, so the answer can be validated directly. Learners
are Brazilian children studying English: explanations are in Portuguese,
target content is in English.
"""

from dataclasses import dataclass


SYSTEM_PROMPT = (
    "You are a friendly English teacher for Brazilian children. "
    "Always answer with ONLY a JSON object, no markdown."
)

DIFFICULTY_GUIDE = {
    "Easy": "a very common, concrete noun a 6-year-old knows (animal, fruit, toy)",
    "Medium": "a common everyday object or place with one or two syllables more",
    "Hard": "a less common but still picturable noun, possibly a compound word",
}


@dataclass
class Prompts:
    """
    Collection of prompts for the generation flows.

    Each method returns the user message for one flow.
    """

    @staticmethod
    def translate(text: str, context: str) -> str:
        """Prompt to translate a word inside its sentence."""
        return f"""
Translate the English word or expression "{text}" into Brazilian Portuguese,
as it is used in this sentence: "{context}".

Output as JSON:
{{
    "translation": "Portuguese translation",
    "explanation": "short explanation in Portuguese of the meaning in this context",
    "synonyms": ["English synonym", "..."]
}}
"""

    @staticmethod
    def evaluate_translation(original_text: str, reference_translation: str, user_translation: str) -> str:
        """Prompt to grade a learner's translation against a reference."""
        return f"""
A student translated an English text into Portuguese. Grade the translation.

Original text: "{original_text}"
Reference translation: "{reference_translation}"
Student translation: "{user_translation}"

Be encouraging. Output as JSON:
{{
    "score": integer from 0 to 100,
    "feedback": "feedback in Portuguese",
    "suggestion": "an improved translation, or null if it is already good"
}}
"""

    @staticmethod
    def daily_word(cache_buster: str) -> str:
        """Prompt for the word of the day."""
        return f"""
Pick one English word for a child to learn today. Vary your choice;
request id: {cache_buster}.

Output as JSON:
{{
    "word": "THE WORD IN CAPITAL LETTERS",
    "hint": "a one-sentence hint in Portuguese that does not contain the word"
}}
"""

    @staticmethod
    def daily_sentence(level: str, cache_buster: str) -> str:
        """Prompt for the sentence of the day."""
        return f"""
Write one short English sentence suitable for a learner at CEFR level {level}.
Vary your choice; request id: {cache_buster}.

Output as JSON:
{{
    "sentence": "the English sentence",
    "translation": "its Portuguese translation"
}}
"""

    @staticmethod
    def story(level: str, topic: str | None, cache_buster: str) -> str:
        """Prompt for a short graded-reader story."""
        about = f' about "{topic}"' if topic else ""
        return f"""
Write a very short children's story in English{about}, at CEFR level {level}
(3 to 6 sentences). Request id: {cache_buster}.

Output as JSON:
{{
    "title": "title in Portuguese",
    "content": "the story in English",
    "level": "{level}",
    "translation": "the story translated into Portuguese"
}}
"""

    @staticmethod
    def placement_test(answers_text: str) -> str:
        """Prompt to place a learner from graded answers."""
        return f"""
A student answered an English placement test. Each line shows the question
level, whether the answer was correct, the question and the chosen option:

{answers_text}

Decide the student's CEFR level (A1, A2, B1, B2, C1 or C2). Output as JSON:
{{
    "final_level": "CEFR level",
    "analysis": "two or three sentences in Portuguese explaining strengths and what to study next"
}}
"""

    @staticmethod
    def challenge_word(difficulty: str) -> str:
        """Prompt for the blurry-image target word."""
        guide = DIFFICULTY_GUIDE.get(difficulty, DIFFICULTY_GUIDE["Easy"])
        return f"""
Choose {guide}. It must be easy to draw as a single picture.

Output as JSON:
{{
    "words": ["the word in lowercase"]
}}
"""

    @staticmethod
    def memory_words(count: int) -> str:
        """Prompt for the memory-game vocabulary."""
        return f"""
Choose {count} different, simple English nouns a child can recognise from a
picture. No two words may be synonyms.

Output as JSON:
{{
    "words": ["word", "..."]
}}
"""

    @staticmethod
    def image(word: str) -> str:
        """Prompt for the picture illustrating a word."""
        return (
            f"A single {word}, colourful children's book illustration, "
            "plain background, no text or letters"
        )
