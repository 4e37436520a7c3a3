"""Configuration for habitbook.

Settings live in ``~/.config/habitbook/config.toml``. Without a config file,
or without Supabase credentials, the journal runs in local-only mode.
"""

import os
from pathlib import Path
from typing import Any, Optional

import toml

CONFIG_DIR = Path.home() / ".config" / "habitbook"
CONFIG_PATH = CONFIG_DIR / "config.toml"

URL_ENV_VAR = "HABITBOOK_SUPABASE_URL"
KEY_ENV_VAR = "HABITBOOK_SUPABASE_ANON_KEY"

PLACEHOLDERS = {"your-project-url", "your-anon-key"}


def load_config(path: Optional[Path] = None) -> Optional[dict[str, Any]]:
    """Load the configuration file.

    Args:
        path: Config file path. Defaults to CONFIG_PATH.

    Returns:
        Config dict or None if missing or unreadable.
    """
    config_path = path or CONFIG_PATH

    if not config_path.exists():
        return None

    try:
        return toml.load(config_path)
    except (toml.TomlDecodeError, OSError):
        return None


def create_template_config(path: Optional[Path] = None) -> Path:
    """Create a template configuration file.

    Returns:
        Path of the created file.
    """
    config_path = path or CONFIG_PATH
    config_path.parent.mkdir(parents=True, exist_ok=True)

    template = {
        "supabase": {
            "url": "your-project-url",  # or HABITBOOK_SUPABASE_URL env var
            "anon_key": "your-anon-key",  # or HABITBOOK_SUPABASE_ANON_KEY env var
            "redirect_url": "",
        },
        "storage": {
            "path": "",  # Leave empty for ~/.config/habitbook/habitbook.db
        },
        "logging": {
            "level": "WARNING",
        },
    }

    with open(config_path, "w") as f:
        toml.dump(template, f)

    return config_path


def _setting(value: Optional[str], env_var: str) -> Optional[str]:
    """Pick a config value, falling back to an environment variable."""
    if value and value not in PLACEHOLDERS:
        return value
    return os.environ.get(env_var) or None


def get_supabase_settings(config: Optional[dict]) -> Optional[dict[str, str]]:
    """Get Supabase connection settings.

    Returns:
        Dict with url, anon_key and redirect_url, or None for local-only mode.
    """
    section = (config or {}).get("supabase", {})
    url = _setting(section.get("url"), URL_ENV_VAR)
    key = _setting(section.get("anon_key"), KEY_ENV_VAR)

    if not url or not key:
        return None

    return {
        "url": url,
        "anon_key": key,
        "redirect_url": section.get("redirect_url") or "",
    }


def validate_config(config: Optional[dict]) -> list[str]:
    """Validate configuration and return list of missing keys.

    Only a half-configured Supabase section is an error; no section at all
    means local-only mode.
    """
    section = (config or {}).get("supabase", {})
    url = _setting(section.get("url"), URL_ENV_VAR)
    key = _setting(section.get("anon_key"), KEY_ENV_VAR)

    missing = []
    if url and not key:
        missing.append(f"supabase.anon_key (or set {KEY_ENV_VAR} env var)")
    if key and not url:
        missing.append(f"supabase.url (or set {URL_ENV_VAR} env var)")
    return missing


def get_db_path(config: Optional[dict]) -> Path:
    """Get the local journal database path."""
    custom = (config or {}).get("storage", {}).get("path")
    if custom:
        return Path(custom).expanduser()
    return CONFIG_DIR / "habitbook.db"


def get_session_path() -> Path:
    """Get the path where auth session tokens are kept."""
    return CONFIG_DIR / "session.json"


def get_log_level(config: Optional[dict]) -> str:
    return (config or {}).get("logging", {}).get("level", "WARNING")
