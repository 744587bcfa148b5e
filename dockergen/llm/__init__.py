"""Chat-completion client."""

from .client import CompletionClient, CompletionError, CompletionRequest

__all__ = ["CompletionClient", "CompletionError", "CompletionRequest"]
