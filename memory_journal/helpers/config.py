"""
==========================
Helpers - Configurations
==========================

This module provides configurations for the application, including paths for the journal database,
uploaded images, the music library, logs and the rendered intro previews.

Features:
- Loads configuration from a YAML file (`.config.yml`, or the file named by `MEMORY_JOURNAL_CONFIG`).
- Falls back to defaults when the file, a section or a value is missing or malformed.
- Defines paths for the main application directories.
- Defines constants for the HTTP server, the music library and audio playback.


Usage:
>>> import memory_journal.helpers.config as cfg
>>> print(cfg.APP_NAME)  # Access the application name
>>> print(cfg.SERVER_PORT)  # Port the journal server listens on

*Author: Sudharshan TK*\n
*Created: 2025-08-24*
"""

import os
from pathlib import Path

import yaml

# =========================
# CONFIG
# =========================

CONFIG_FILE = os.environ.get("MEMORY_JOURNAL_CONFIG", ".config.yml")


def load_config_file(path: str) -> dict:
    """
    Load the YAML configuration file.
    A missing file, an empty file or a file that does not hold a mapping
    yields an empty dict so every setting falls back to its default.

    Args:
        path (str): Path to the YAML file.

    Returns:
        dict: Parsed configuration.
    """
    if not os.path.isfile(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError:
        return {}
    return data if isinstance(data, dict) else {}


def setting(section: str, key: str, default, cast=None):
    """
    Read `cfg[section][key]`, casting it with `cast` when given.
    Falls back to `default` when the value is missing or cannot be cast.
    """
    block = cfg.get(section)
    if not isinstance(block, dict) or block.get(key) is None:
        return default
    value = block[key]
    if cast is None:
        return value
    try:
        return cast(value)
    except (TypeError, ValueError):
        return default


cfg = load_config_file(CONFIG_FILE)

# App Name
APP_NAME = str(setting("app", "name", "Memory Journal"))

# Base Path
APP_BASE_DIR = Path(setting("paths", "base_dir", "data"))

# Main Dirs
BASE_DIR = Path(os.path.join(APP_BASE_DIR, APP_NAME))
LOG_FOLDER = Path(os.path.join(BASE_DIR, "Logs"))
DB_FOLDER = Path(os.path.join(BASE_DIR, "Database"))
PREVIEW_DIR = Path(os.path.join(BASE_DIR, "Previews"))

# Public (served) Dirs
PUBLIC_DIR = Path(setting("paths", "public_dir", os.path.join(BASE_DIR, "public")))
UPLOADS_DIR = Path(os.path.join(PUBLIC_DIR, "uploads"))
MUSIC_DIR = Path(os.path.join(PUBLIC_DIR, "music"))

# DB Paths
DB_PATH = Path(os.path.join(DB_FOLDER, "memories.db"))

# All Paths Arrays
MAIN_PATHS = [
    APP_BASE_DIR,
    BASE_DIR, LOG_FOLDER, DB_FOLDER, PREVIEW_DIR,
    PUBLIC_DIR, UPLOADS_DIR, MUSIC_DIR,
]

# Server Configs
SERVER_PORT = int(os.environ.get("PORT") or setting("server", "port", 3000, int))

# Music Library Configs
SUPPORTED_AUDIO_EXTENSIONS = frozenset(
    ext.lower() for ext in setting(
        "music", "extensions", [".mp3", ".ogg", ".wav", ".m4a", ".aac", ".flac"])
)

# Audio Playback Configs
DEFAULT_VOLUME = setting("audio", "default_volume", 0.3, float)
FADE_IN_MS = setting("audio", "fade_in_ms", 1500, int)
VOLUME_SAVE_DELAY_MS = setting("audio", "volume_save_delay_ms", 400, int)

# Player Configs
PLAYER_FPS = setting("player", "fps", 60, int)
API_BASE_URL = str(setting("player", "api_base_url",
                   f"http://localhost:{SERVER_PORT}"))
API_TIMEOUT = setting("player", "api_timeout", 10.0, float)

# Default emotion tag for new memories
DEFAULT_EMOTION = str(setting("app", "default_emotion", "peaceful"))
