"""
Generation Flows - One coroutine per AI-backed feature.

A flow takes a typed input, prompts the provider, and returns a typed,
validated output. Flows never substitute fallback content: a failure is
raised as GenerationError and the caller decides what to show.

Flows also act as the content source for the two games
(generate_challenge, generate_memory_cards).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol
import asyncio
import random

from .. import config
from .client import GenerationClient, GenerationError
from .models import (
    TranslateInput,
    TranslateOutput,
    EvaluateTranslationInput,
    EvaluateTranslationOutput,
    TextToSpeechInput,
    TextToSpeechOutput,
    DailyWordOutput,
    DailySentenceInput,
    DailySentenceOutput,
    StoryGeneratorInput,
    StoryGeneratorOutput,
    PlacementTestInput,
    PlacementTestOutput,
    Challenge,
    MemoryCard,
    MemoryGameOutput,
    WordList,
)
from .prompts import Prompts


class ContentSource(Protocol):
    """What the game loops need from the content generator."""

    async def generate_challenge(self, difficulty: str) -> Challenge: ...

    async def generate_memory_cards(self) -> MemoryGameOutput: ...


def make_cache_buster() -> str:
    """Unique request marker so the provider does not repeat itself."""
    return datetime.now().isoformat() + str(random.random())


@dataclass
class Flows:
    """
    All generation flows, sharing one client.

    Usage:
        flows = Flows()
        result = await flows.translate(TranslateInput(text="bark", context="Dogs bark."))
    """
    client: GenerationClient = field(default_factory=GenerationClient)
    memory_pairs: int = config.MEMORY_GAME_PAIRS

    async def translate(self, data: TranslateInput) -> TranslateOutput:
        prompt = Prompts.translate(data.text, data.context)
        return await self.client.generate_json(prompt, TranslateOutput, temperature=0.2)

    async def evaluate_translation(self, data: EvaluateTranslationInput) -> EvaluateTranslationOutput:
        prompt = Prompts.evaluate_translation(
            data.original_text, data.reference_translation, data.user_translation
        )
        return await self.client.generate_json(prompt, EvaluateTranslationOutput, temperature=0.2)

    async def text_to_speech(self, data: TextToSpeechInput) -> TextToSpeechOutput:
        audio = await self.client.synthesize_speech(data.text)
        return TextToSpeechOutput(audio_data=audio)

    async def daily_word(self, cache_buster: str | None = None) -> DailyWordOutput:
        prompt = Prompts.daily_word(cache_buster or make_cache_buster())
        return await self.client.generate_json(prompt, DailyWordOutput, temperature=1.0)

    async def daily_sentence(
        self,
        data: DailySentenceInput,
        cache_buster: str | None = None,
    ) -> DailySentenceOutput:
        prompt = Prompts.daily_sentence(data.level.value, cache_buster or make_cache_buster())
        return await self.client.generate_json(prompt, DailySentenceOutput, temperature=1.0)

    async def generate_story(
        self,
        data: StoryGeneratorInput,
        cache_buster: str | None = None,
    ) -> StoryGeneratorOutput:
        prompt = Prompts.story(data.level.value, data.topic, cache_buster or make_cache_buster())
        return await self.client.generate_json(prompt, StoryGeneratorOutput, temperature=0.9)

    async def evaluate_placement_test(self, data: PlacementTestInput) -> PlacementTestOutput:
        lines = [
            f"[{a.level.value}] {'correct' if a.is_correct else 'wrong'} | "
            f"{a.question} -> {a.selected_option}"
            for a in data.answers
        ]
        prompt = Prompts.placement_test("\n".join(lines))
        return await self.client.generate_json(prompt, PlacementTestOutput, temperature=0.2)

    # =========================================================================
    # Game content
    # =========================================================================

    async def generate_challenge(self, difficulty: str) -> Challenge:
        """Pick a word for the difficulty and draw it."""
        words = await self.client.generate_json(
            Prompts.challenge_word(difficulty), WordList, temperature=1.0
        )
        word = words.words[0].strip()
        if not word:
            raise GenerationError("challenge word is empty")
        image_url = await self.client.generate_image(Prompts.image(word))
        return Challenge(word=word, image_url=image_url)

    async def generate_memory_cards(self) -> MemoryGameOutput:
        """Pick the vocabulary and draw every word concurrently."""
        words = await self.client.generate_json(
            Prompts.memory_words(self.memory_pairs), WordList, temperature=1.0
        )
        chosen = [w.strip() for w in words.words if w.strip()][: self.memory_pairs]
        if not chosen:
            raise GenerationError("memory game word list is empty")

        images = await asyncio.gather(
            *(self.client.generate_image(Prompts.image(w)) for w in chosen)
        )
        return MemoryGameOutput(
            cards=[MemoryCard(word=w, image_url=url) for w, url in zip(chosen, images)]
        )
