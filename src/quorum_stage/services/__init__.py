# src/quorum_stage/services/__init__.py
"""Business logic services for the Quorum application."""

from .moderation import ModerationService
from .text_generation import TextGenerationClient, get_text_generation_client

__all__ = [
    "ModerationService",
    "TextGenerationClient",
    "get_text_generation_client",
]
