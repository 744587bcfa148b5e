"""Post-processing of LLM responses."""

from .sanitize import clean_dockerfile, clean_json, strip_code_fences

__all__ = ["clean_dockerfile", "clean_json", "strip_code_fences"]
