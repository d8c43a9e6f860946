from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import ValidationError as SchemaValidationError

from .config_schema import PublisherConfig
from .errors import ConfigError

# GitHub Actions exposes `with:` inputs as INPUT_<NAME> environment variables.
_ACTION_INPUTS: dict[str, str] = {
    "src": "INPUT_SRC",
    "publication_id": "INPUT_PUBLICATION_ID",
    "post_status": "INPUT_POST_STATUS",
    "update_existing_posts": "INPUT_UPDATE_EXISTING_POSTS",
}
_ACTION_TOKEN_INPUT = "INPUT_HASHNODE_PAT"

_TRUE_VALUES = ("true", "True", "TRUE")
_FALSE_VALUES = ("false", "False", "FALSE")


@dataclass(frozen=True)
class RuntimeSecrets:
    access_token: str


def load_config_file(path: str | Path) -> dict[str, Any]:
    """
    Load an optional YAML config file as a plain mapping.

    Raises ConfigError when the file is missing, unreadable or not a mapping.
    """
    p = Path(path)

    if not p.exists():
        raise ConfigError(f"Config file not found: {p}")

    try:
        raw_text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read config file: {p}") from e

    try:
        data = yaml.safe_load(raw_text)
    except Exception as e:  # PyYAML can raise multiple exception types
        raise ConfigError(f"Failed to parse YAML in {p}: {e}") from e

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise ConfigError(f"Top-level YAML in {p} must be a mapping/object")

    return data


def parse_boolean_input(name: str, value: str) -> bool:
    v = (value or "").strip()
    if v in _TRUE_VALUES:
        return True
    if v in _FALSE_VALUES:
        return False
    raise ConfigError(
        f"Input does not meet YAML 1.2 Core Schema: {name}. "
        "Support boolean input list: `true | True | TRUE | false | False | FALSE`"
    )


def action_inputs(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """
    Collect non-empty GitHub Actions inputs from the environment.
    """
    env = os.environ if environ is None else environ

    out: dict[str, Any] = {}
    for field, env_name in _ACTION_INPUTS.items():
        raw = (env.get(env_name) or "").strip()
        if not raw:
            continue
        if field == "update_existing_posts":
            out[field] = parse_boolean_input(env_name, raw)
        else:
            out[field] = raw
    return out


def resolve_config(
    overrides: Mapping[str, Any] | None = None,
    *,
    config_path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> PublisherConfig:
    """
    Merge config sources into a validated PublisherConfig.

    Precedence (lowest first): YAML file, GitHub Actions inputs, explicit overrides.
    Overrides set to None are ignored.
    """
    data: dict[str, Any] = {}
    source = "arguments"

    if config_path is not None:
        data.update(load_config_file(config_path))
        source = str(config_path)

    data.update(action_inputs(environ))

    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value

    try:
        return PublisherConfig.model_validate(data)
    except SchemaValidationError as e:
        raise ConfigError(_format_pydantic_errors(e, source)) from e


def resolve_runtime_secrets(
    config: PublisherConfig, *, environ: Mapping[str, str] | None = None
) -> RuntimeSecrets:
    """
    Resolve the Hashnode access token from the environment.

    The variable named by config.token_env wins; INPUT_HASHNODE_PAT is the fallback.
    """
    env = os.environ if environ is None else environ

    token = (env.get(config.token_env) or "").strip()
    if not token:
        token = (env.get(_ACTION_TOKEN_INPUT) or "").strip()

    if not token:
        raise ConfigError(
            f"Missing required environment variables: {config.token_env} "
            f"(or {_ACTION_TOKEN_INPUT})"
        )

    return RuntimeSecrets(access_token=token)


def ensure_source_dir(config: PublisherConfig) -> Path:
    src = Path(config.src)
    if not src.exists():
        raise ConfigError(f'Source directory "{src}" does not exist or is not accessible')
    if not src.is_dir():
        raise ConfigError(f'Source path "{src}" is not a directory')
    return src


def _format_pydantic_errors(err: SchemaValidationError, source: str) -> str:
    lines: list[str] = [f"Invalid configuration in {source}:"]
    for item in err.errors():
        loc = ".".join(str(part) for part in item.get("loc", [])) or "<root>"
        msg = item.get("msg", "invalid value")
        lines.append(f"- {loc}: {msg}")
    return "\n".join(lines)
