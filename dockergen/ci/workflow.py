"""GitHub Actions workflow that builds and pushes the generated image."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml

WORKFLOW_DIR = Path(".github") / "workflows"
WORKFLOW_FILENAME = "docker-build-push.yml"
USERNAME_SECRET = "DOCKERHUB_USERNAME"
PASSWORD_SECRET = "DOCKERHUB_PASSWORD"


def _secret_ref(name: str) -> str:
    return "${{ secrets.%s }}" % name


def build_workflow(image_name: str, *, branch: str = "main") -> Dict[str, Any]:
    """Return the workflow definition tagging the image as ``<user>/<image_name>:latest``."""
    return {
        "name": "Docker Build and Push",
        "on": {
            "push": {"branches": [branch]},
            "workflow_dispatch": None,
        },
        "jobs": {
            "build-and-push": {
                "runs-on": "ubuntu-latest",
                "steps": [
                    {"name": "Checkout code", "uses": "actions/checkout@v4"},
                    {"name": "Set up Docker Buildx", "uses": "docker/setup-buildx-action@v3"},
                    {
                        "name": "Login to DockerHub",
                        "uses": "docker/login-action@v3",
                        "with": {
                            "username": _secret_ref(USERNAME_SECRET),
                            "password": _secret_ref(PASSWORD_SECRET),
                        },
                    },
                    {
                        "name": "Build and push",
                        "uses": "docker/build-push-action@v5",
                        "with": {
                            "context": ".",
                            "push": True,
                            "tags": f"{_secret_ref(USERNAME_SECRET)}/{image_name}:latest",
                        },
                    },
                ],
            }
        },
    }


def render_workflow(image_name: str, *, branch: str = "main") -> str:
    return yaml.safe_dump(
        build_workflow(image_name, branch=branch),
        sort_keys=False,
        default_flow_style=False,
        width=120,
    )


def write_workflow(repo_path: Path, image_name: str, *, branch: str = "main") -> Path:
    """Write the workflow under ``.github/workflows`` of ``repo_path``, replacing any existing one."""
    workflow_dir = Path(repo_path) / WORKFLOW_DIR
    workflow_dir.mkdir(parents=True, exist_ok=True)
    workflow_path = workflow_dir / WORKFLOW_FILENAME
    workflow_path.write_text(render_workflow(image_name, branch=branch), encoding="utf-8")
    return workflow_path


__all__ = [
    "PASSWORD_SECRET",
    "USERNAME_SECRET",
    "WORKFLOW_FILENAME",
    "build_workflow",
    "render_workflow",
    "write_workflow",
]
