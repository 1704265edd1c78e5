"""
SpeaKids - Language-learning games and activities for children

A small service around an AI collaborator that produces learning content.
The service provides:
- Translation, text-to-speech and daily word/sentence activities
- A CEFR placement test and short graded stories
- Guessing games (blurry image, memory match) driven by a pure reducer
"""

__version__ = "0.1.0"
