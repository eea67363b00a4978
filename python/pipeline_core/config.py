"""YAML configuration loading for pipelines.

This module loads PipelineConfig documents from YAML files. A config file
mirrors the pipeline's configuration surface:

    middleware:
      - web
    groups:
      web: [session, "csrf:strict"]
    aliases:
      session: myapp.middleware.SessionMiddleware
      csrf: myapp.middleware.CsrfMiddleware
    log_level: debug

The config file is located in this priority order:
1. PIPELINE_CORE_CONFIG environment variable (explicit override)
2. ./config/pipeline.yaml or ./config/pipeline.yml

Example:
    >>> from pipeline_core.config import find_pipeline_config, load_pipeline_config
    >>>
    >>> path = find_pipeline_config()
    >>> if path:
    ...     pipeline = Pipeline.from_config(load_pipeline_config(path), container)
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from .exceptions import ConfigurationError
from .logging import log_debug, log_warn
from .types import PipelineConfig

CONFIG_PATH_ENV = "PIPELINE_CORE_CONFIG"
DEFAULT_CONFIG_FILES = ("pipeline.yaml", "pipeline.yml")


def find_pipeline_config(base_dir: Path | None = None) -> Path | None:
    """Find the pipeline configuration file.

    Args:
        base_dir: Directory holding the ``config`` folder. Defaults to the
            current working directory.

    Returns:
        Path to the config file, or None if not found.
    """
    env_path = os.environ.get(CONFIG_PATH_ENV)
    if env_path:
        path = Path(env_path)
        if path.is_file():
            log_debug(f"Using {CONFIG_PATH_ENV}: {path}")
            return path
        log_warn(f"{CONFIG_PATH_ENV} does not exist: {env_path}")

    config_dir = (base_dir or Path.cwd()) / "config"
    for filename in DEFAULT_CONFIG_FILES:
        path = config_dir / filename
        if path.is_file():
            log_debug(f"Using pipeline config: {path}")
            return path

    log_debug("No pipeline configuration file found")
    return None


def load_pipeline_config(path: str | Path) -> PipelineConfig:
    """Load and validate a pipeline configuration file.

    Args:
        path: Path to a YAML document.

    Returns:
        The validated PipelineConfig. An empty document yields the defaults.

    Raises:
        ConfigurationError: If the file cannot be read or parsed, or fails
            validation.
    """
    path = Path(path)
    try:
        with path.open() as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to load pipeline config {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Pipeline config {path} must be a mapping, got {type(data).__name__}"
        )

    try:
        return PipelineConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid pipeline config {path}: {e}") from e


__all__ = ["CONFIG_PATH_ENV", "find_pipeline_config", "load_pipeline_config"]
