"""User-level dbtuner config helpers (~/.dbtuner/config.yaml)."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import yaml

USER_CONFIG_DIR = ".dbtuner"
USER_CONFIG_FILE = "config.yaml"

# Profile key -> environment variable read by Settings.
PROFILE_ENV_KEYS = {
    "target_db": "TARGET_DB",
    "output_dir": "OUTPUT_DIR",
    "safe_mode": "SAFE_MODE",
    "export_schema": "EXPORT_SCHEMA",
    "db_host": "DB_HOST",
    "db_port": "DB_PORT",
    "db_user": "DB_USER",
    "db_password": "DB_PASSWORD",
}


def user_config_path(home: Path | None = None) -> Path:
    """Return absolute path to user-level config file."""
    base = home.expanduser().resolve() if home else Path.home().resolve()
    return base / USER_CONFIG_DIR / USER_CONFIG_FILE


def load_user_config(home: Path | None = None) -> dict[str, Any]:
    """Load user config, returning empty dict when absent/invalid."""
    path = user_config_path(home)
    if not path.exists():
        return {}
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError):
        return {}
    return raw if isinstance(raw, dict) else {}


def save_user_config(values: dict[str, Any], home: Path | None = None) -> Path:
    """Merge and persist user-level config."""
    path = user_config_path(home)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = load_user_config(home)
    payload.update(values)
    payload["updated_at"] = datetime.now(UTC).replace(microsecond=0).isoformat()
    path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
    try:
        path.chmod(0o600)
    except OSError:
        # Ignore platforms/filesystems that do not support chmod semantics.
        pass
    return path


def profile_env_defaults(profile: dict[str, Any]) -> dict[str, str]:
    """Translate profile values into env var defaults (empty values skipped)."""
    defaults: dict[str, str] = {}
    for key, env_key in PROFILE_ENV_KEYS.items():
        value = profile.get(key)
        if value is None:
            continue
        if isinstance(value, bool):
            text = "true" if value else "false"
        else:
            text = str(value).strip()
        if text:
            defaults[env_key] = text
    return defaults
