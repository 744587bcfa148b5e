"""LLM-assisted Dockerfile generation and CI provisioning for Git repositories."""

__version__ = "0.1.0"
