"""
Pytest fixtures for SpeaKids tests.
"""

import random

import pytest
from pydantic import ValidationError

from ..content import Flows, GenerationError
from ..content.models import Challenge, MemoryCard, MemoryGameOutput
from ..engine_core import Reducer


DEFAULT_RESPONSES = {
    "TranslateOutput": {
        "translation": "latir",
        "explanation": "Latir é o som que o cachorro faz.",
        "synonyms": ["ladrar"],
    },
    "EvaluateTranslationOutput": {
        "score": 85,
        "feedback": "Muito bem! Só faltou o artigo.",
        "suggestion": "O gato está na mesa.",
    },
    "DailyWordOutput": {"word": "SUN", "hint": "Brilha no céu durante o dia."},
    "DailySentenceOutput": {"sentence": "I like apples.", "translation": "Eu gosto de maçãs."},
    "StoryGeneratorOutput": {
        "title": "A Pipa Perdida",
        "content": "Tom has a red kite. The wind takes it away.",
        "level": "A1",
        "translation": "Tom tem uma pipa vermelha. O vento a leva embora.",
    },
    "PlacementTestOutput": {"final_level": "A2", "analysis": "Bom vocabulário básico."},
    "WordList": {"words": ["dragon", "cat", "dog"]},
}


class FakeClock:
    """Manual clock; `sleep` advances it instead of waiting."""

    def __init__(self, now: float = 0.0):
        self.now = now
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeContentSource:
    """Content source returning fixed rounds, or failing on demand."""

    def __init__(self, word="dragon", pairs=(("cat", "img://cat"), ("dog", "img://dog")), fail=False):
        self.word = word
        self.pairs = list(pairs)
        self.fail = fail
        self.calls: list[tuple] = []

    async def generate_challenge(self, difficulty: str) -> Challenge:
        self.calls.append(("challenge", difficulty))
        if self.fail:
            raise GenerationError("provider down")
        return Challenge(word=self.word, image_url=f"img://{self.word}")

    async def generate_memory_cards(self) -> MemoryGameOutput:
        self.calls.append(("memory",))
        if self.fail:
            raise GenerationError("provider down")
        return MemoryGameOutput(cards=[MemoryCard(word=w, image_url=u) for w, u in self.pairs])


class FakeGenerationClient:
    """Stands in for GenerationClient; answers are keyed by output model name."""

    def __init__(self, responses=None, fail=False):
        self.responses = dict(DEFAULT_RESPONSES)
        self.responses.update(responses or {})
        self.fail = fail
        self.prompts: list[str] = []

    @property
    def is_configured(self) -> bool:
        return True

    async def generate_json(self, prompt, output_model, temperature=0.7):
        self.prompts.append(prompt)
        if self.fail:
            raise GenerationError("provider down")
        data = self.responses.get(output_model.__name__)
        if data is None:
            raise GenerationError(f"no answer for {output_model.__name__}")
        try:
            return output_model.model_validate(data)
        except ValidationError as e:
            raise GenerationError(str(e)) from e

    async def generate_image(self, prompt):
        self.prompts.append(prompt)
        if self.fail:
            raise GenerationError("provider down")
        return "data:image/png;base64,aW1n"

    async def synthesize_speech(self, text):
        if self.fail:
            raise GenerationError("provider down")
        return "data:audio/mpeg;base64,bXAz"


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for reproducible shuffles and hints."""
    return random.Random(1234)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def reducer(rng, clock) -> Reducer:
    """Reducer with a seeded rng and a manual clock."""
    return Reducer(rng=rng, clock=clock)


@pytest.fixture
def content_source() -> FakeContentSource:
    return FakeContentSource()


@pytest.fixture
def fake_client() -> FakeGenerationClient:
    return FakeGenerationClient()


@pytest.fixture
def flows(fake_client) -> Flows:
    """Real flows on top of the fake provider."""
    return Flows(client=fake_client, memory_pairs=2)
