"""Configuration loading for cliffnotes (.cliffnotes.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml
from dotenv import dotenv_values

CONFIG_FILENAME = ".cliffnotes.yml"
API_KEY_ENV = "ANTHROPIC_API_KEY"

DEFAULT_INCLUDE: tuple[str, ...] = (
    "**/*.ts",
    "**/*.tsx",
    "**/*.js",
    "**/*.jsx",
)

DEFAULT_EXCLUDE: tuple[str, ...] = (
    "**/node_modules/**",
    "**/dist/**",
    "**/build/**",
    "**/.next/**",
    "**/coverage/**",
    "**/*.test.*",
    "**/*.spec.*",
    "**/*.d.ts",
    "**/generated/**",
)


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class LLMConfig:
    """Summarization service settings."""

    model: str = "claude-opus-4-5-20251101"
    max_tokens: int = 4096
    base_url: str = "https://api.anthropic.com"
    request_timeout: float = 120.0
    api_key: Optional[str] = None


@dataclass
class PricingConfig:
    """USD price per million tokens, used for cost estimates."""

    input_per_million: float = 5.0
    output_per_million: float = 25.0


@dataclass
class CliffnotesConfig:
    """Represents the settings defined in .cliffnotes.yml."""

    root: Path
    concurrency: int = 5
    include: List[str] = field(default_factory=lambda: list(DEFAULT_INCLUDE))
    exclude: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE))
    output_file: str = "CLIFFNOTES.md"
    agent_file: str = "CLIFFNOTES_AGENT.md"
    cache_file: str = ".cliffnotes-cache.json"
    max_file_chars: int = 100_000
    max_avg_line_length: int = 500
    llm: LLMConfig = field(default_factory=LLMConfig)
    pricing: PricingConfig = field(default_factory=PricingConfig)

    @property
    def cache_path(self) -> Path:
        return self.root / self.cache_file

    @property
    def artifact_names(self) -> List[str]:
        """Files the tool writes itself and must never analyze."""
        return [self.output_file, self.agent_file, self.cache_file]


def load_config(config_path: Path) -> CliffnotesConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return CliffnotesConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = CliffnotesConfig(root=root)

    concurrency = _as_int(data.get("concurrency"))
    if concurrency is not None:
        if concurrency < 1:
            raise ConfigError("concurrency must be a positive integer")
        config.concurrency = concurrency

    if "include" in data:
        config.include = _as_str_list(data.get("include"))
    if "exclude" in data:
        config.exclude = _as_str_list(data.get("exclude"))

    for name in ("output_file", "agent_file", "cache_file"):
        value = _as_str(data.get(name))
        if value:
            setattr(config, name, value)

    for name in ("max_file_chars", "max_avg_line_length"):
        value = _as_int(data.get(name))
        if value is not None:
            setattr(config, name, value)

    llm_data = _as_dict(data.get("llm"))
    if llm_data:
        llm = config.llm
        llm.model = _as_str(llm_data.get("model")) or llm.model
        llm.base_url = _as_str(llm_data.get("base_url")) or llm.base_url
        llm.api_key = _as_str(llm_data.get("api_key"))
        max_tokens = _as_int(llm_data.get("max_tokens"))
        if max_tokens is not None:
            llm.max_tokens = max_tokens
        timeout = _as_float(llm_data.get("request_timeout"))
        if timeout is not None:
            llm.request_timeout = timeout

    pricing_data = _as_dict(data.get("pricing"))
    if pricing_data:
        input_price = _as_float(pricing_data.get("input_per_million"))
        output_price = _as_float(pricing_data.get("output_per_million"))
        if input_price is not None:
            config.pricing.input_per_million = input_price
        if output_price is not None:
            config.pricing.output_per_million = output_price

    return config


def resolve_api_key(
    root: Path,
    environ: Mapping[str, str],
    *,
    configured: str | None = None,
    home: Path | None = None,
) -> str | None:
    """Locate the service API key once so it can be passed down explicitly.

    Lookup order: configured value, the given environment mapping, then
    ``.env`` files in the project root, ``~/.cliffnotes`` and
    ``~/.config/cliffnotes``.
    """
    if configured:
        return configured
    value = environ.get(API_KEY_ENV)
    if value:
        return value

    home_dir = home if home is not None else Path.home()
    candidates = (
        root / ".env",
        home_dir / ".cliffnotes" / ".env",
        home_dir / ".config" / "cliffnotes" / ".env",
    )
    for candidate in candidates:
        if not candidate.is_file():
            continue
        found = dotenv_values(candidate).get(API_KEY_ENV)
        if found:
            return found.strip()
    return None


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []
