"""Generator configuration.

Every field of GeneratorConfig is optional. merge_config layers configs in
priority order (CLI options, then the config file) and falls back to the
defaults below only for fields no layer supplied.
"""

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from openapi2bruno.errors import ConfigError

DEFAULT_COMPANY = "Company"
DEFAULT_ENVIRONMENTS = ["DEV", "QA", "PROD"]
DEFAULT_OUTPUT_DIR = "."


class GeneratorConfig(BaseModel):
    """One configuration source; None means 'not supplied'."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    company: str | None = None
    environments: list[str] | None = None
    base_urls: dict[str, str] | None = Field(default=None, alias="baseUrls")
    output_dir: str | None = Field(default=None, alias="outputDir")


class ResolvedConfig(BaseModel):
    """Fully merged configuration used for a run."""

    model_config = ConfigDict(frozen=True)

    company: str = DEFAULT_COMPANY
    environments: list[str] = Field(default_factory=lambda: list(DEFAULT_ENVIRONMENTS))
    base_urls: dict[str, str] = Field(default_factory=dict)
    output_dir: str = DEFAULT_OUTPUT_DIR


def load_config(file_path: Path) -> GeneratorConfig:
    """Load a JSON config file."""
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {file_path}: {e}") from e
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file {file_path}: {e.msg} (line {e.lineno})") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {file_path} must contain a JSON object")
    try:
        return GeneratorConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config file {file_path}: {e}") from e


def merge_config(*layers: GeneratorConfig) -> ResolvedConfig:
    """Merge config layers, highest priority first.

    Scalar fields take the first supplied value. base_urls are merged per
    environment name, higher-priority layers winning.
    """
    values = {}
    for field in ("company", "environments", "output_dir"):
        for layer in layers:
            value = getattr(layer, field)
            if value is not None:
                values[field] = value
                break

    base_urls: dict[str, str] = {}
    for layer in reversed(layers):
        if layer.base_urls:
            base_urls.update(layer.base_urls)
    values["base_urls"] = base_urls

    return ResolvedConfig(**values)


def parse_base_url_options(options: tuple[str, ...]) -> dict[str, str] | None:
    """Turn repeated 'ENV=URL' CLI options into a mapping."""
    if not options:
        return None
    result = {}
    for option in options:
        env, sep, url = option.partition("=")
        if not sep or not env.strip() or not url.strip():
            raise ConfigError(f"Invalid --base-url '{option}': expected ENV=URL")
        result[env.strip()] = url.strip()
    return result
