"""Runtime configuration for scenes, renderers and input sources."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

logger = logging.getLogger(__name__)

_ENV_PREFIX = "GHOSTTY_SCENE_"


@dataclass
class SceneConfig:
    """Scene configuration.

    ``from_env`` reads ``GHOSTTY_SCENE_*`` overrides from the environment;
    anything not set keeps the defaults below.
    """

    auto_focus: bool = False
    image_chunk_size: int = 4096
    write_log: str = ""
    read_size: int = 4096
    default_columns: int = 80
    default_rows: int = 24

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> SceneConfig:
        env = os.environ if environ is None else environ
        config = cls()
        config.auto_focus = env.get(f"{_ENV_PREFIX}AUTO_FOCUS") == "1"
        config.write_log = env.get(f"{_ENV_PREFIX}WRITE_LOG", "")
        config.image_chunk_size = _int_from_env(
            env, "IMAGE_CHUNK_SIZE", config.image_chunk_size
        )
        config.read_size = _int_from_env(env, "READ_SIZE", config.read_size)
        return config


def _int_from_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(f"{_ENV_PREFIX}{name}")
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s%s=%r: not an integer", _ENV_PREFIX, name, raw)
        return default
    if value <= 0:
        logger.warning("Ignoring %s%s=%r: must be positive", _ENV_PREFIX, name, raw)
        return default
    return value
