"""Prompt rendering for story generation requests."""

from .builder import StoryPrompt, StoryPromptBuilder

__all__ = ["StoryPrompt", "StoryPromptBuilder"]
