"""
Generation Client - Thin async wrapper around the OpenAI API.

Three primitives cover every flow:
- generate_json: chat completion in JSON mode, validated into a model
- generate_image: a picture returned as a data URI
- synthesize_speech: MP3 audio returned as a data URI

Every failure (missing key, provider error, bad JSON, schema mismatch)
is raised as GenerationError.
"""

from __future__ import annotations
from typing import TypeVar
import base64
import json
import logging
import time

from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, ValidationError

from .. import config
from .prompts import SYSTEM_PROMPT


logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class GenerationError(Exception):
    """The AI provider could not produce a usable answer."""


class GenerationClient:
    """
    Async client for the AI provider.

    The underlying AsyncOpenAI client is created on first use, so the
    application starts without credentials.

    Usage:
        client = GenerationClient()
        output = await client.generate_json(prompt, TranslateOutput)
    """

    def __init__(
        self,
        api_key: str | None = None,
        chat_model: str = config.CHAT_MODEL,
        image_model: str = config.IMAGE_MODEL,
        tts_model: str = config.TTS_MODEL,
        tts_voice: str = config.TTS_VOICE,
        openai_client: AsyncOpenAI | None = None,
    ):
        self.api_key = api_key or config.OPENAI_API_KEY
        self.chat_model = chat_model
        self.image_model = image_model
        self.tts_model = tts_model
        self.tts_voice = tts_voice
        self._client = openai_client

    @property
    def is_configured(self) -> bool:
        return self._client is not None or bool(self.api_key)

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.api_key:
                raise GenerationError("OPENAI_API_KEY is not set")
            self._client = AsyncOpenAI(api_key=self.api_key)
        return self._client

    async def generate_json(
        self,
        prompt: str,
        output_model: type[ModelT],
        temperature: float = 0.7,
    ) -> ModelT:
        """Run a JSON-mode chat completion and validate it into `output_model`."""
        client = self._get_client()
        start_time = time.monotonic()
        try:
            completion = await client.chat.completions.create(
                model=self.chat_model,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=temperature,
            )
        except OpenAIError as e:
            raise GenerationError(f"chat completion failed: {e}") from e

        if not completion.choices:
            raise GenerationError("chat completion returned no choices")
        raw = completion.choices[0].message.content or ""
        logger.debug(
            "chat.completions.create (%s) answered in %.0fms",
            output_model.__name__, (time.monotonic() - start_time) * 1000,
        )

        try:
            return output_model.model_validate(json.loads(raw))
        except json.JSONDecodeError as e:
            raise GenerationError(f"provider returned invalid JSON: {e}") from e
        except ValidationError as e:
            raise GenerationError(f"incomplete {output_model.__name__}: {e}") from e

    async def generate_image(self, prompt: str) -> str:
        """Generate one picture and return it as a PNG data URI."""
        client = self._get_client()
        try:
            result = await client.images.generate(
                model=self.image_model,
                prompt=prompt,
                size="1024x1024",
                response_format="b64_json",
            )
        except OpenAIError as e:
            raise GenerationError(f"image generation failed: {e}") from e

        image_data = result.data[0] if result.data else None
        if image_data is None or not image_data.b64_json:
            raise GenerationError("image response missing b64_json data")
        return f"data:image/png;base64,{image_data.b64_json}"

    async def synthesize_speech(self, text: str) -> str:
        """Read `text` aloud and return the audio as an MP3 data URI."""
        client = self._get_client()
        try:
            response = await client.audio.speech.create(
                model=self.tts_model,
                voice=self.tts_voice,
                input=text,
                response_format="mp3",
            )
        except OpenAIError as e:
            raise GenerationError(f"speech synthesis failed: {e}") from e

        audio = base64.b64encode(response.content).decode("ascii")
        return f"data:audio/mpeg;base64,{audio}"
