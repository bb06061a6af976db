"""Filesystem locations used by metasearch."""

import os
from pathlib import Path

ENV_HOME = "METASEARCH_HOME"


def get_user_data_dir() -> Path:
    """Return the user data directory.

    ``$METASEARCH_HOME`` wins when set; otherwise ``~/.metasearch``.
    The directory is not created here.
    """
    override = os.getenv(ENV_HOME)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".metasearch"


def get_config_file() -> Path:
    """Return the path of the YAML config file."""
    return get_user_data_dir() / "config.yaml"
