"""
Content - The AI generation collaborator.

Content generation:
1. Builds a prompt for the requested flow
2. Calls the AI provider (chat, image or speech)
3. Validates the answer into a typed output model
4. Raises GenerationError when any step fails

Fallback content is NOT produced here; see speakids.learning.
"""

from .client import GenerationClient, GenerationError
from .flows import Flows, ContentSource, make_cache_buster
from .prompts import Prompts

__all__ = [
    "GenerationClient",
    "GenerationError",
    "Flows",
    "ContentSource",
    "make_cache_buster",
    "Prompts",
]
