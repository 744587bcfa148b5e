"""Prompt construction for the completion endpoint."""

from .builder import PromptBuilder

__all__ = ["PromptBuilder"]
