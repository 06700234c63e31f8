"""Static configuration for jukebot.

All user-editable settings (channel, polling, speaker, lookups, logging) live
in a single JSON file for quick edits without touching Python. Secrets stay
in the environment (.env).
"""

import json
import os

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# Where to store the SQLite database holding the watermark.
DB_PATH = os.getenv("JUKEBOT_DB", os.path.join(PROJECT_ROOT, "jukebot.db"))

CONFIG_PATH = os.getenv("JUKEBOT_CONFIG", os.path.join(PROJECT_ROOT, "config.json"))


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _resolve_path(path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Channel to watch: "@username" or a numeric chat id.
CHANNEL = _CONFIG.get("channel")
BOT_NAME = _CONFIG.get("bot_name", "jukebot")

# Polling cadence and history window.
# - REPLAY_HISTORY_ON_FIRST_RUN: react to history already present when no
#   watermark is stored yet (off by default to avoid a burst of reactions)
_polling = _CONFIG.get("polling", {})
POLL_INTERVAL_SECONDS = float(_polling.get("interval_seconds", 2))
HISTORY_COUNT = int(_polling.get("history_count", 10))
REPLAY_HISTORY_ON_FIRST_RUN = bool(_polling.get("replay_history_on_first_run", False))

# Speaker is addressed directly by IP or discovered by zone name.
_sonos = _CONFIG.get("sonos", {})
SONOS_SPEAKER_IP = _sonos.get("speaker_ip")
SONOS_SPEAKER_NAME = _sonos.get("speaker_name")

# Static file server so the speaker can fetch bundled clips.
_file_server = _CONFIG.get("file_server", {})
FILE_SERVER_ENABLED = bool(_file_server.get("enabled", True))
FILE_SERVER_HOST = _file_server.get("host", "0.0.0.0")
FILE_SERVER_PORT = int(_file_server.get("port", 8181))
MEDIA_DIR = _resolve_path(_file_server.get("media_dir", "media"))

_giphy = _CONFIG.get("giphy", {})
GIPHY_TIMEOUT_SECONDS = float(_giphy.get("timeout_seconds", 10))
GIPHY_RATING = _giphy.get("rating", "pg-13")

_lyrics = _CONFIG.get("lyrics", {})
LYRICS_BASE_URL = _lyrics.get("base_url", "https://api.lyrics.ovh/v1")
LYRICS_TIMEOUT_SECONDS = float(_lyrics.get("timeout_seconds", 15))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
