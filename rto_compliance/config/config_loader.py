"""Load runtime configuration for the compliance validator."""

from __future__ import annotations

import hashlib
import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from .settings import RuntimeConfig

logger = logging.getLogger(__name__)

CONFIG_PATH = Path(__file__).with_name("policy.yaml")

# Matches env("VAR") and env("VAR", "default") placeholders
ENV_PATTERN = re.compile(r'env\("([^"]+)"(?:\s*,\s*"([^"]*)")?\)')

# Placeholders resolving to an empty string are treated as unset
OPTIONAL_EMPTY = {"country_code", "company_name"}


def _resolve_env_placeholders(value: Any) -> Any:
    """Recursively resolve env("VAR") placeholders in YAML values."""
    if isinstance(value, str):
        match = ENV_PATTERN.search(value)
        if match:
            var_name, default = match.group(1), match.group(2)
            env_value = os.getenv(var_name)
            if env_value is None:
                if default is not None:
                    return default
                raise ValueError(f"Environment variable {var_name} not set (required by config)")
            return env_value
        return value
    elif isinstance(value, dict):
        return {k: _resolve_env_placeholders(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_resolve_env_placeholders(item) for item in value]
    else:
        return value


def _drop_empty_optionals(data: Dict[str, Any]) -> Dict[str, Any]:
    holidays = data.get("holidays")
    if isinstance(holidays, dict):
        for key in OPTIONAL_EMPTY:
            if holidays.get(key) == "":
                holidays[key] = None
    return data


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge override dict into base dict."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _compute_config_version(yaml_content: str, override_content: Dict[str, Any]) -> str:
    """Compute SHA256 hash of YAML content + override content for version tracking."""
    combined = {
        "yaml": yaml_content,
        "override": json.dumps(override_content, sort_keys=True, default=str),
    }
    combined_str = json.dumps(combined, sort_keys=True)
    return hashlib.sha256(combined_str.encode("utf-8")).hexdigest()[:16]


def load_runtime_config(
    path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
    env_file: Optional[Path] = None,
) -> RuntimeConfig:
    """Load runtime configuration from YAML file with optional overrides.

    Args:
        path: Optional path to a policy YAML file. Defaults to CONFIG_PATH.
        overrides: Optional nested dict merged over the YAML content.
        env_file: Optional .env file loaded before placeholders are resolved.

    Returns:
        RuntimeConfig instance with resolved env placeholders and merged overrides.
    """
    load_dotenv(env_file)

    target = path or CONFIG_PATH
    with target.open("r", encoding="utf-8") as handle:
        yaml_content = handle.read()
        data = yaml.safe_load(yaml_content) or {}

    data = _drop_empty_optionals(_resolve_env_placeholders(data))

    if overrides:
        data = _deep_merge(data, overrides)

    config_version = _compute_config_version(yaml_content, overrides or {})
    if "metadata" not in data or data["metadata"] is None:
        data["metadata"] = {}
    data["metadata"]["config_version"] = config_version

    config = RuntimeConfig.model_validate(data)
    logger.debug(
        "Runtime config loaded",
        extra={"config_version": config_version, "policy_fingerprint": config.policy.fingerprint()},
    )
    return config
