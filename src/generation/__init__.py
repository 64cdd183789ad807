"""Gemini generation layer for the OpenFisca rule editor.

This module provides:
- build_prompt: Renders the few-shot rule prompt
- GenerationClient: Sends the seeded conversation to Gemini
- build_conversation: The three-turn conversation sent per generation
- Models: ChatTurn, ChatRole, GenerationResult
"""

from src.generation.client import GenerationClient, build_conversation
from src.generation.models import ChatRole, ChatTurn, GenerationResult, is_alternating
from src.generation.prompt_builder import build_prompt

__all__ = [
    # Prompt
    "build_prompt",
    # Client
    "GenerationClient",
    "build_conversation",
    # Models
    "ChatRole",
    "ChatTurn",
    "GenerationResult",
    "is_alternating",
]
