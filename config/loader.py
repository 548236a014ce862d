"""Configuration file discovery and loading."""

import json
import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Any

from .main_config import Config

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "chatstream"
GLOBAL_CONFIG_DIR = ".chatstream"

# "//" not preceded by ":" so URLs such as https://... survive
_LINE_COMMENT = re.compile(r"(?<!:)//.*?$", re.MULTILINE)
_BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)


def strip_jsonc_comments(content: str) -> str:
    """Remove ``//`` and ``/* */`` comments so JSONC parses as JSON."""
    return _BLOCK_COMMENT.sub("", _LINE_COMMENT.sub("", content))


def load_config_file(path: Path) -> dict[str, Any] | None:
    """
    Read one JSON or JSONC config file.

    Returns:
        The parsed object, or None when the file is missing or unreadable
    """
    if not path.is_file():
        return None

    try:
        text = path.read_text()
        data = json.loads(strip_jsonc_comments(text) if path.suffix == ".jsonc" else text)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to load config from %s: %s", path, e)
        return None

    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level must be an object", path)
        return None
    return data


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_configs(current, value)
        else:
            merged[key] = value
    return merged


def project_config_paths(project_root: Path) -> list[Path]:
    """Candidate project config files, most preferred first."""
    return [
        project_root / f"{CONFIG_FILENAME}.jsonc",
        project_root / f"{CONFIG_FILENAME}.json",
        project_root / GLOBAL_CONFIG_DIR / f"{CONFIG_FILENAME}.jsonc",
    ]


def load_config(project_root: Path | None = None, home: Path | None = None) -> Config:
    """
    Load the effective configuration.

    The global file ``~/.chatstream/chatstream.jsonc`` is read first; the
    first project file found is merged over it.

    Args:
        project_root: Directory searched for project config (default: cwd)
        home: Directory holding the global config (default: user home)

    Returns:
        Validated Config
    """
    project_root = project_root or Path.cwd()
    home = home or Path.home()

    data = load_config_file(home / GLOBAL_CONFIG_DIR / f"{CONFIG_FILENAME}.jsonc") or {}
    for path in project_config_paths(project_root):
        project_data = load_config_file(path)
        if project_data:
            logger.debug("Using project config %s", path)
            data = merge_configs(data, project_data)
            break

    return Config.model_validate(data)


@lru_cache(maxsize=1)
def get_config(project_root: Path | None = None) -> Config:
    """
    Get the process-wide configuration.

    Loaded once; call ``get_config.cache_clear()`` to reload.
    """
    return load_config(project_root)
