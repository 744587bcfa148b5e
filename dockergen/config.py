"""Configuration loading for dockergen (environment, .env and .dockergen.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import dotenv_values

CONFIG_FILENAME = ".dockergen.yml"


class ConfigError(RuntimeError):
    """Raised when required settings are missing or cannot be parsed."""


@dataclass
class LLMConfig:
    """Chat-completion endpoint settings."""

    api_url: str
    model: str = "gpt-4o-mini"
    api_key: Optional[str] = None
    request_timeout: float = 60.0
    max_retries: int = 3
    retry_delay_ms: int = 1000


@dataclass
class GenerationConfig:
    """Defaults applied to every Dockerfile generation run."""

    multi_stage: bool = False
    template_path: Optional[Path] = None


@dataclass
class GitHubConfig:
    """GitHub API access for the provisioning flow."""

    token: Optional[str] = None
    api_url: str = "https://api.github.com"
    fork_ready_delay: float = 15.0
    default_branch: str = "main"


@dataclass
class RegistryConfig:
    """Container registry credentials uploaded as repository secrets."""

    username: Optional[str] = None
    password: Optional[str] = None


@dataclass
class DockerGenConfig:
    """Settings resolved once at startup and passed to every component."""

    llm: LLMConfig
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)
    registry: RegistryConfig = field(default_factory=RegistryConfig)

    def require_provisioning(self) -> None:
        """Ensure the settings needed by ``dockergen provision`` are present."""
        missing = []
        if not self.github.token:
            missing.append("GITHUB_TOKEN")
        if not self.registry.username:
            missing.append("DOCKERHUB_USERNAME")
        if not self.registry.password:
            missing.append("DOCKERHUB_PASSWORD")
        if missing:
            raise ConfigError(f"Missing required settings for provisioning: {', '.join(missing)}")

    def secret_values(self) -> list[str]:
        """Return configured secrets that must never reach the logs."""
        values = [self.llm.api_key, self.github.token, self.registry.password]
        return [value for value in values if value]


def load_config(
    environ: Mapping[str, str] | None = None,
    *,
    config_path: Path | None = None,
    env_file: Path | None = None,
) -> DockerGenConfig:
    """Build the configuration from ``.dockergen.yml``, ``.env`` and the environment.

    Precedence, lowest to highest: YAML file, ``.env`` file, process environment.
    """
    file_data = _read_config_file(config_path or Path.cwd() / CONFIG_FILENAME)

    env: Dict[str, str] = {}
    dotenv_path = env_file or Path.cwd() / ".env"
    if dotenv_path.is_file():
        env.update({key: value for key, value in dotenv_values(dotenv_path).items() if value is not None})
    env.update(os.environ if environ is None else environ)

    llm_data = _as_dict(file_data.get("llm"))
    generation_data = _as_dict(file_data.get("generation"))
    github_data = _as_dict(file_data.get("github"))
    registry_data = _as_dict(file_data.get("registry"))

    api_url = _pick(env, "GPT_API_URL", llm_data.get("api_url"))
    if not api_url:
        raise ConfigError("GPT_API_URL is not set; configure the chat-completion endpoint.")

    llm = LLMConfig(
        api_url=str(api_url),
        model=str(_pick(env, "GPT_MODEL", llm_data.get("model")) or LLMConfig.model),
        api_key=_as_str(_pick(env, "GPT_API_KEY", llm_data.get("api_key"))),
        request_timeout=_as_float(
            _pick(env, "GPT_REQUEST_TIMEOUT", llm_data.get("request_timeout")),
            default=LLMConfig.request_timeout,
            name="GPT_REQUEST_TIMEOUT",
        ),
        max_retries=_as_int(
            _pick(env, "MAX_RETRIES", llm_data.get("max_retries")),
            default=LLMConfig.max_retries,
            name="MAX_RETRIES",
        ),
        retry_delay_ms=_as_int(
            _pick(env, "RETRY_DELAY", llm_data.get("retry_delay_ms")),
            default=LLMConfig.retry_delay_ms,
            name="RETRY_DELAY",
        ),
    )
    if llm.max_retries < 1:
        raise ConfigError("MAX_RETRIES must be at least 1")
    if llm.retry_delay_ms < 0:
        raise ConfigError("RETRY_DELAY must not be negative")

    template = _as_str(_pick(env, "TEMPLATE_PATH", generation_data.get("template_path")))
    generation = GenerationConfig(
        multi_stage=_as_bool(_pick(env, "DEFAULT_USE_MULTI_STAGE", generation_data.get("multi_stage"))),
        template_path=Path(template).expanduser() if template else None,
    )

    github = GitHubConfig(
        token=_as_str(_pick(env, "GITHUB_TOKEN", github_data.get("token"))),
        api_url=str(_pick(env, "GITHUB_API_URL", github_data.get("api_url")) or GitHubConfig.api_url).rstrip("/"),
        fork_ready_delay=_as_float(
            _pick(env, "FORK_READY_DELAY", github_data.get("fork_ready_delay")),
            default=GitHubConfig.fork_ready_delay,
            name="FORK_READY_DELAY",
        ),
        default_branch=str(
            _pick(env, "GIT_DEFAULT_BRANCH", github_data.get("default_branch")) or GitHubConfig.default_branch
        ),
    )

    registry = RegistryConfig(
        username=_as_str(_pick(env, "DOCKERHUB_USERNAME", registry_data.get("username"))),
        password=_as_str(_pick(env, "DOCKERHUB_PASSWORD", registry_data.get("password"))),
    )

    return DockerGenConfig(llm=llm, generation=generation, github=github, registry=registry)


def _read_config_file(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        return {}
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _pick(env: Mapping[str, str], key: str, fallback: Any) -> Any:
    value = env.get(key)
    if value is not None and value != "":
        return value
    return fallback


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        text = str(value)
        return text or None
    return None


def _as_float(value: Any, *, default: float, name: str) -> float:
    if value is None:
        return default
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be a number")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be a number, got {value!r}") from exc


def _as_int(value: Any, *, default: int, name: str) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be an integer")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from exc


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"true", "1", "yes"}
    return False
