"""
Reading and writing RouteKit configuration files.

A configuration file is a TOML or JSON document with an optional
``[general]`` table and one ``[apis.<name>]`` table per API.
"""

from __future__ import annotations

import json
import logging
import os
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, BinaryIO

from routekit.infra.paths import CONFIG_ENV_VAR, LOCAL_CONFIG_FILENAMES, SETTING_PATH

logger = logging.getLogger(__name__)


def _read_json(fp: BinaryIO) -> Any:
    return json.loads(fp.read().decode("utf-8"))


_READERS: dict[str, tuple[str, Callable[[BinaryIO], Any], type[Exception]]] = {
    ".json": ("JSON", _read_json, json.JSONDecodeError),
    ".toml": ("TOML", tomllib.load, tomllib.TOMLDecodeError),
}


def _candidates(config_path: str | Path | None) -> list[tuple[str, Path]]:
    """List the places a configuration file is looked up, by priority."""
    if config_path:
        return [("explicit", Path(config_path).expanduser())]

    found: list[tuple[str, Path]] = []
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        found.append((CONFIG_ENV_VAR, Path(env_path).expanduser()))
    found.extend(("local", Path.cwd() / name) for name in LOCAL_CONFIG_FILENAMES)
    found.append(("user", SETTING_PATH))
    return found


def _resolve_file_path(config_path: str | Path | None) -> Path | None:
    """Return the first existing candidate file, or None.

    A missing explicit path ends the lookup. A missing ``$ROUTEKIT_CONFIG``
    file is reported and skipped.
    """
    for origin, path in _candidates(config_path):
        if path.is_file():
            logger.debug("Using %s config file: %s", origin, path)
            return path.resolve()
        if origin in ("explicit", CONFIG_ENV_VAR):
            logger.warning("Specified file not found: %s", path)
            if origin == "explicit":
                return None
    return None


def _load_by_extension(path: Path) -> dict[str, Any]:
    """
    Parse ``path`` according to its extension (``.json`` or ``.toml``).

    Raises:
        ValueError: If the extension is unsupported, the document is invalid,
            or its root (or its ``apis`` entry) is not a table.
    """
    ext = path.suffix.lower()
    if ext not in _READERS:
        raise ValueError(f"Unsupported config file extension: {ext}")

    kind, reader, decode_error = _READERS[ext]
    try:
        with path.open("rb") as f:
            data = reader(f)
    except (OSError, UnicodeDecodeError, decode_error) as e:
        raise ValueError(f"Invalid {kind} in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Config root must be a dict, got {type(data)} in {path}")
    if not isinstance(data.get("apis", {}), dict):
        raise ValueError(f"'apis' must be a table of API blocks in {path}")

    return data


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """
    Load the RouteKit configuration.

    Lookup order:
        1. ``config_path``, when given (no further lookup)
        2. The file named by the ``ROUTEKIT_CONFIG`` environment variable
        3. ``routekit.toml`` then ``routekit.json`` in the working directory
        4. ``settings.json`` in the user config directory

    Raises:
        FileNotFoundError: If no configuration file is found.
        ValueError: If the file cannot be parsed.
    """
    path = _resolve_file_path(config_path)
    if path is None:
        raise FileNotFoundError("No valid config file found.")

    logger.debug("Loading configuration from: %s", path)
    return _load_by_extension(path)


def save_config(
    config: dict[str, Any],
    output_path: str | Path = SETTING_PATH,
) -> None:
    """
    Write ``config`` as JSON, by default to the user-level settings file.

    Raises:
        OSError: If the file cannot be written.
    """
    output = Path(output_path).expanduser().resolve()
    output.parent.mkdir(parents=True, exist_ok=True)

    try:
        with output.open("w", encoding="utf-8") as f:
            json.dump(config, f, indent=2, ensure_ascii=False)
    except OSError as e:
        logger.error("Failed to write config JSON '%s': %s", output, e)
        raise

    logger.info("Configuration saved to JSON: %s", output)
