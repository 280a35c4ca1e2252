import logging
import os
from functools import lru_cache

import yaml

from cmdx.errors import ConfigError
from cmdx.lib import paths

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "editor": None,  # Used when $EDITOR is unset; falls back to DEFAULT_EDITOR.
    "workdir": "scope",
    "propagate_exit_code": False,
    "lock": True,
    "log_level": "WARNING",
}

DEFAULT_EDITOR = "vim"
WORKDIRS = ("scope", "script", "current")
ENV_PREFIX = "CMDX_"


def clear_cache():
    load_config.cache_clear()


def _validate_config(cfg: dict) -> None:
    """Validate config structure. Fail fast on invalid types."""
    if not isinstance(cfg, dict):
        raise ConfigError(f"Config must be a mapping, got {type(cfg).__name__}")

    if cfg.get("workdir") not in WORKDIRS:
        raise ConfigError(f"Config 'workdir' must be one of {', '.join(WORKDIRS)}")

    if cfg.get("editor") is not None and not isinstance(cfg["editor"], str):
        raise ConfigError("Config 'editor' must be a string")


def _coerce(original, value: str):
    if isinstance(original, bool):
        return value.lower() in ("true", "1", "t", "y", "yes")
    return value


def _apply_env(cfg: dict) -> None:
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        config_key = key[len(ENV_PREFIX) :].lower()
        if config_key in DEFAULT_CONFIG:
            cfg[config_key] = _coerce(DEFAULT_CONFIG[config_key], value)


@lru_cache(maxsize=1)
def load_config() -> dict:
    """Load defaults, then config.yaml, then CMDX_* environment overrides."""
    cfg = DEFAULT_CONFIG.copy()

    path = paths.config_file()
    if path.exists():
        try:
            with open(path) as f:
                user_cfg = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Cannot parse {path}: {e}") from e
        if not isinstance(user_cfg, dict):
            raise ConfigError(f"Config must be a mapping, got {type(user_cfg).__name__}")
        logger.debug(f"Loaded config from {path}")
        cfg.update(user_cfg)

    _apply_env(cfg)
    _validate_config(cfg)
    return cfg
