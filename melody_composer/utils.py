"""Settings and randomness helpers shared by the CLI and library callers.

``load_settings`` reads default generation options from a JSON file in the
user's home directory (or wherever ``MELODY_COMPOSER_SETTINGS`` points).  The
file is optional: when it is missing or unreadable an empty dictionary is
returned so generation always proceeds with the built-in defaults.

``make_rng`` builds the explicit random source threaded through every
stochastic function in the package.

Example
-------
>>> rng = make_rng(42)
>>> rng.random() == make_rng(42).random()
True
"""

from __future__ import annotations

import json
import logging
import os
import random
from pathlib import Path
from typing import Optional

__all__ = ["DEFAULT_SETTINGS_FILE", "settings_path", "load_settings", "make_rng"]

# Default location for user preferences. The environment variable allows tests
# and shared machines to point at a different file.
env_path = os.environ.get("MELODY_COMPOSER_SETTINGS")
if env_path:
    DEFAULT_SETTINGS_FILE = Path(env_path).expanduser()
else:
    DEFAULT_SETTINGS_FILE = Path.home() / ".melody_composer_settings.json"


def settings_path() -> Path:
    """Return the settings file honouring ``MELODY_COMPOSER_SETTINGS`` at call time."""

    override = os.environ.get("MELODY_COMPOSER_SETTINGS")
    return Path(override).expanduser() if override else DEFAULT_SETTINGS_FILE


def load_settings(path: Optional[Path] = None) -> dict:
    """Load saved generation defaults from ``path`` if it exists.

    @param path (Path): Location of the settings file. Defaults to
        :func:`settings_path`.
    @returns dict: Loaded settings or an empty dictionary when unavailable.
    """

    path = Path(path) if path is not None else settings_path()
    if not path.is_file():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, json.JSONDecodeError) as exc:
        logging.error(f"Could not load settings: {exc}")
        return {}
    if not isinstance(data, dict):
        logging.error("Could not load settings: %s does not contain an object", path)
        return {}
    return data


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Return a ``random.Random`` seeded with ``seed``.

    ``None`` produces an unseeded generator; the seed is logged at debug level
    so a surprising melody can be reproduced.
    """

    if seed is None:
        return random.Random()
    logging.debug("Using random seed %s", seed)
    return random.Random(seed)
