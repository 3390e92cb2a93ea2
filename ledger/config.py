from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

import streamlit as st

CONFIG_FILE_NAME = "settings.json"
ENV_DATA_DIR = "LEDGER_DATA_DIR"
ENV_CURRENCY = "LEDGER_CURRENCY"
ENV_LOG_LEVEL = "LEDGER_LOG_LEVEL"
SESSION_DATA_DIR_KEY = "ledger_data_dir"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    db_path: Path
    currency: str = "AZN"


def configure_logging(level: Optional[str] = None) -> None:
    level_name = (level or os.getenv(ENV_LOG_LEVEL) or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _default_data_dir() -> Path:
    # Not a hard-coded absolute path: uses the user's home directory.
    return Path.home() / ".batch_ledger"


def _load_persisted_settings(data_dir: Path) -> dict:
    cfg = data_dir / CONFIG_FILE_NAME
    if cfg.exists():
        try:
            return json.loads(cfg.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable settings file %s", cfg)
            return {}
    return {}


def persist_data_dir(data_dir_str: str) -> Path:
    data_dir = Path(data_dir_str).expanduser().resolve()
    data_dir.mkdir(parents=True, exist_ok=True)

    cfg = data_dir / CONFIG_FILE_NAME
    payload = {"data_dir": str(data_dir)}
    cfg.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    # Also remember the choice in the default folder so the next start finds it.
    default_dir = _default_data_dir()
    if default_dir.resolve() != data_dir:
        default_dir.mkdir(parents=True, exist_ok=True)
        (default_dir / CONFIG_FILE_NAME).write_text(json.dumps(payload, indent=2), encoding="utf-8")

    logger.info("Data directory set to %s", data_dir)
    return data_dir


def resolve_settings(
    session_dir: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    default_dir: Optional[Path] = None,
) -> Settings:
    # Priority order:
    # 1) Session state (set via Data Management page)
    # 2) Environment variable
    # 3) Persisted settings in default folder
    # 4) Default folder
    env = os.environ if env is None else env
    default_dir = default_dir or _default_data_dir()

    if session_dir:
        data_dir = Path(session_dir).expanduser().resolve()
    elif env.get(ENV_DATA_DIR):
        data_dir = Path(env.get(ENV_DATA_DIR, "")).expanduser().resolve()
    else:
        persisted = _load_persisted_settings(default_dir)
        data_dir = Path(persisted.get("data_dir", default_dir)).expanduser().resolve()

    data_dir.mkdir(parents=True, exist_ok=True)
    db_path = data_dir / "ledger.db"
    currency = (env.get(ENV_CURRENCY) or "AZN").strip() or "AZN"
    return Settings(data_dir=data_dir, db_path=db_path, currency=currency)


@st.cache_resource
def get_settings() -> Settings:
    return resolve_settings(session_dir=st.session_state.get(SESSION_DATA_DIR_KEY))
