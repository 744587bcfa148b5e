"""Shared prompt fragments for project analysis and Dockerfile generation."""

from __future__ import annotations

MAX_KEY_FILES = 10

MULTI_STAGE_DIRECTIVE = (
    'Use a multi-stage build with exactly two named stages: "builder" and "final". '
    'Compile or install dependencies in "builder" and copy only the runtime artifacts into "final".'
)

SINGLE_STAGE_DIRECTIVE = (
    "Use a single-stage build. Do not name any stage (no `AS <name>` syntax) "
    "and do not declare more than one FROM instruction."
)

REQUIRED_PROPERTIES: tuple[str, ...] = (
    "Choose an appropriate base image, preferring official minimal or lightweight variants (alpine, slim, distroless).",
    "Set the working directory, copy only the files needed, and install dependencies from the detected dependency files.",
    "Create and switch to a non-root user before starting the application.",
    "Declare the environment variables the application needs explicitly with ENV.",
    "EXPOSE ports only when the project information lists them.",
    "Start the application with ENTRYPOINT and/or CMD using the detected run command.",
    "Add a HEALTHCHECK only when a port or health endpoint is known.",
)

ANALYSIS_FIELDS: tuple[str, ...] = (
    "Programming language(s) used",
    "Main dependency management files (e.g., requirements.txt, package.json, composer.json)",
    "Likely entry point file",
    "Build commands",
    "Run commands",
    "Ports that need to be exposed",
    "Environment variables",
    "Potential volume mounts",
    "Existing Docker-related configuration",
    "Project type (web service, CLI, library, worker, ...)",
    "Frameworks in use",
)


__all__ = [
    "ANALYSIS_FIELDS",
    "MAX_KEY_FILES",
    "MULTI_STAGE_DIRECTIVE",
    "REQUIRED_PROPERTIES",
    "SINGLE_STAGE_DIRECTIVE",
]
