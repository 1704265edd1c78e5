"""
Configuration - Environment-driven settings and logging setup.

Every setting is read once at import time. Nothing here is required to
import the package; a missing OPENAI_API_KEY only fails the first call
to the AI provider.
"""

import logging
import os


# Environment configuration
SPEAKIDS_ENV = os.getenv("SPEAKIDS_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

# AI provider
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
CHAT_MODEL = os.getenv("SPEAKIDS_CHAT_MODEL", "gpt-4o-mini")
IMAGE_MODEL = os.getenv("SPEAKIDS_IMAGE_MODEL", "dall-e-3")
TTS_MODEL = os.getenv("SPEAKIDS_TTS_MODEL", "tts-1")
TTS_VOICE = os.getenv("SPEAKIDS_TTS_VOICE", "nova")

# Games
MEMORY_GAME_PAIRS = int(os.getenv("SPEAKIDS_MEMORY_PAIRS", "6"))
MISMATCH_DELAY_SECONDS = float(os.getenv("SPEAKIDS_MISMATCH_DELAY", "1.2"))
SESSION_MAX_AGE_SECONDS = int(os.getenv("SPEAKIDS_SESSION_MAX_AGE", "3600"))

# Logging
LOG_LEVEL = os.getenv("SPEAKIDS_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str | None = None) -> logging.Logger:
    """
    Attach a console handler to the package logger.

    Safe to call more than once; existing handlers are replaced.
    """
    logger = logging.getLogger("speakids")
    logger.setLevel((level or LOG_LEVEL).upper())

    # Prevent duplicate handlers
    if logger.handlers:
        logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(handler)

    return logger
