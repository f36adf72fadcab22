from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

import streamlit as st

CONFIG_FILE_NAME = "settings.json"
ENV_DATA_DIR = "SHOPBOOKS_DATA_DIR"
ENV_LOG_LEVEL = "SHOPBOOKS_LOG_LEVEL"
SESSION_DATA_DIR = "shopbooks_data_dir"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    db_path: Path
    currency: str = "K"
    log_level: str = "INFO"


def _default_data_dir() -> Path:
    return Path.home() / ".shopbooks"


def _load_persisted_settings(data_dir: Path) -> dict:
    cfg = data_dir / CONFIG_FILE_NAME
    if cfg.exists():
        try:
            return json.loads(cfg.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable settings file %s", cfg)
            return {}
    return {}


def persist_data_dir(data_dir_str: str) -> None:
    data_dir = Path(data_dir_str).expanduser().resolve()
    data_dir.mkdir(parents=True, exist_ok=True)

    # Always written to the default folder so the choice survives restarts.
    default_dir = _default_data_dir()
    default_dir.mkdir(parents=True, exist_ok=True)
    payload = {"data_dir": str(data_dir)}
    (default_dir / CONFIG_FILE_NAME).write_text(json.dumps(payload, indent=2), encoding="utf-8")

    st.session_state[SESSION_DATA_DIR] = str(data_dir)
    logger.info("Data directory set to %s", data_dir)


def resolve_data_dir(session_value: str | None = None) -> Path:
    # Priority order:
    # 1) Session state (set via Data Management page)
    # 2) Environment variable
    # 3) Persisted settings in default folder
    # 4) Default folder
    if session_value:
        return Path(session_value).expanduser().resolve()
    if os.getenv(ENV_DATA_DIR):
        return Path(os.getenv(ENV_DATA_DIR, "")).expanduser().resolve()
    default_dir = _default_data_dir()
    persisted = _load_persisted_settings(default_dir)
    return Path(persisted.get("data_dir", default_dir)).expanduser().resolve()


def build_settings(data_dir: Path) -> Settings:
    data_dir.mkdir(parents=True, exist_ok=True)
    log_level = os.getenv(ENV_LOG_LEVEL, "INFO").strip().upper() or "INFO"
    return Settings(data_dir=data_dir, db_path=data_dir / "app.db", log_level=log_level)


@st.cache_resource
def _settings_for(data_dir_str: str) -> Settings:
    return build_settings(Path(data_dir_str))


def get_settings() -> Settings:
    data_dir = resolve_data_dir(st.session_state.get(SESSION_DATA_DIR))
    return _settings_for(str(data_dir))


def configure_logging(level: str = "INFO") -> None:
    # basicConfig is a no-op once the root logger has handlers, so reruns are safe.
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
