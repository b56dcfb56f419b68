"""
Configuration loading and validation for the jwt-tool CLI.
"""

import logging
import os
from pathlib import Path

import yaml

from .policy import ABSENT, ValidationPolicy

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "PROJECT_ROOT",
    "ConfigError",
    "load_config",
    "parse_policy",
    "resolve_secret",
]

logger = logging.getLogger(__name__)

# Project root directory (two levels up from this file)
PROJECT_ROOT = os.path.dirname(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
)

DEFAULT_CONFIG_PATH = os.path.join(PROJECT_ROOT, "config", "config.yaml")

_PLACEHOLDER_SECRETS = {"REPLACE_WITH_YOUR_SECRET", "your-secret"}

# YAML key -> claim name whose absence may be allowed
_ALLOW_LIST_KEYS = {
    "allowable_issuers": "iss",
    "allowable_subjects": "sub",
    "allowable_audiences": "aud",
}

_BOOL_KEYS = (
    "validate_expiration_time_claim",
    "validate_not_before_claim",
    "validate_issued_at_claim",
    "verify_signature",
)


class ConfigError(Exception):
    """Raised when the configuration file is missing or invalid."""


def load_config(config_path: str) -> dict:
    """Load the YAML configuration file.

    Raises:
        ConfigError: If the file is missing, empty or not a mapping.
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigError(
            f"Config file not found: {config_path}\n"
            "Copy config/config.yaml.example to config/config.yaml and fill in your values."
        )

    try:
        with open(path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Could not parse {config_path}: {exc}") from exc

    if not cfg:
        raise ConfigError(f"Config file is empty: {config_path}")
    if not isinstance(cfg, dict):
        raise ConfigError(f"Config file must contain a mapping: {config_path}")

    logger.debug("Config loaded from %s", config_path)
    return cfg


def parse_policy(cfg: dict) -> ValidationPolicy:
    """Build a :class:`ValidationPolicy` from the ``validation`` section.

    Keys left out of the file keep their defaults.  ``allow_absent`` lists
    claims (``iss``, ``sub``, ``aud``) whose absence is accepted by the
    matching allow-list.
    """
    section = cfg.get("validation") or {}
    if not isinstance(section, dict):
        raise ConfigError("validation must be a mapping")

    known = set(_ALLOW_LIST_KEYS) | set(_BOOL_KEYS) | {"timing_tolerance", "allow_absent"}
    unknown = set(section) - known
    if unknown:
        raise ConfigError(
            f"Unknown key(s) in validation section: {', '.join(sorted(unknown))}"
        )

    allow_absent = section.get("allow_absent") or []
    if not isinstance(allow_absent, list):
        raise ConfigError("validation.allow_absent must be a list")
    bad_claims = set(allow_absent) - set(_ALLOW_LIST_KEYS.values())
    if bad_claims:
        raise ConfigError(
            f"validation.allow_absent only accepts iss, sub, aud; got {', '.join(sorted(map(str, bad_claims)))}"
        )

    overrides: dict = {}
    for key, claim in _ALLOW_LIST_KEYS.items():
        values = section.get(key)
        if values is None or values is False:
            if claim in allow_absent:
                logger.warning(
                    "validation.allow_absent lists %r but %s is disabled; ignoring",
                    claim,
                    key,
                )
            continue
        if not isinstance(values, list):
            raise ConfigError(f"validation.{key} must be a list")
        if claim in allow_absent:
            values = values + [ABSENT]
        overrides[key] = values

    for key in _BOOL_KEYS:
        if key in section:
            if not isinstance(section[key], bool):
                raise ConfigError(f"validation.{key} must be true or false")
            overrides[key] = section[key]

    if "timing_tolerance" in section:
        overrides["timing_tolerance"] = section["timing_tolerance"]

    try:
        return ValidationPolicy().merged(overrides)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid validation settings: {exc}") from exc


def resolve_secret(cfg: dict) -> str | None:
    """Return the signing secret from the config, or None if not configured.

    ``secret`` takes precedence over ``secret_env`` (the name of an
    environment variable holding the secret).
    """
    secret = cfg.get("secret")
    if secret:
        if not isinstance(secret, str):
            raise ConfigError("secret must be a string")
        if secret in _PLACEHOLDER_SECRETS:
            raise ConfigError("secret still holds the placeholder value")
        return secret

    env_name = cfg.get("secret_env")
    if env_name:
        value = os.environ.get(env_name)
        if not value:
            raise ConfigError(f"Environment variable {env_name} is not set")
        return value

    return None
