"""Configuration template substitution utilities."""

import os
import re
from pathlib import Path

import yaml
from loguru import logger
from pydantic import ValidationError

from src.automarket.runtime.config.config_data import ConfigData


_PLACEHOLDER = re.compile(
    r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?:(?P<op>:-|:\?)(?P<arg>[^}]*))?\}"
)


def substitute_env_vars(text: str) -> str:
    """
    Substitute environment variable placeholders in text.

    Supports formats:
    - ${VAR_NAME} - required variable (raises error if missing)
    - ${VAR_NAME:-default} - optional with default value
    - ${VAR_NAME:?error_message} - required with custom error message
    """

    def resolve(match: re.Match) -> str:
        name, op, arg = match.group("name", "op", "arg")
        value = os.getenv(name)
        if value is not None:
            return value
        if op == ":-":
            return arg
        if op == ":?":
            raise ValueError(f"Required environment variable {name}: {arg}")
        raise ValueError(f"Required environment variable {name} not set")

    return _PLACEHOLDER.sub(resolve, text)


def _apply_environment_overrides(env_mode: str) -> None:
    """Copy ``<ENV>_FOO`` variables to ``FOO`` so templates see the per-environment value."""
    prefix = f"{env_mode.upper()}_"
    overrides = [(var, value) for var, value in os.environ.items() if var.startswith(prefix)]
    if overrides:
        logger.info(f"Applying environment-specific overrides: {[name for name, _ in overrides]}")

    for var_name, var_value in overrides:
        os.environ[var_name[len(prefix):]] = var_value
        logger.debug(f"Set environment variable {var_name[len(prefix):]} from {var_name}")


def _filter_providers(config: ConfigData, env_mode: str) -> None:
    enabled_providers = {}
    for name, provider in config.oidc.providers.items():
        if not provider.enabled:
            logger.info(f"Skipping disabled OIDC provider '{name}'")
            continue
        if provider.dev_only and env_mode not in ("development", "test"):
            logger.info(f"Skipping OIDC provider '{name}' in non-development environment")
            continue
        enabled_providers[name] = provider

    if not enabled_providers:
        logger.warning("No OIDC providers are enabled; every protected route will answer 401")
    config.oidc.providers = enabled_providers


def load_templated_yaml(file_path: Path) -> ConfigData:
    """
    Load a YAML file with environment variable substitution.

    A missing file is not an error: the built-in defaults are returned so the
    service can start (and tests can import) without a config.yaml.

    Args:
        file_path: Path to the YAML file

    Returns:
        Parsed and validated configuration

    Raises:
        ValueError: If required environment variables are missing or the file is invalid
    """
    env_mode = os.getenv("APP_ENVIRONMENT", "development")

    if not file_path.exists():
        logger.info(f"No configuration file at {file_path}; using defaults")
        return ConfigData()

    content = file_path.read_text()
    logger.info(f"Loading configuration for environment: {env_mode}")
    _apply_environment_overrides(env_mode)

    substituted_content = substitute_env_vars(content)

    try:
        loaded = yaml.safe_load(substituted_content)
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e
    if not loaded:
        raise ValueError(f"Configuration file {file_path} is empty")

    try:
        config = ConfigData(**loaded.get("config", {}))
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e

    _filter_providers(config, env_mode)
    return config
