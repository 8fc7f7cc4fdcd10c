# notecheck/config.py

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List

import yaml

from notecheck.checker import DEFAULT_URL

DEFAULT_CONFIG_PATH = "configs/notecheck.yaml"


@dataclass
class CheckerSettings:
    url: str = DEFAULT_URL
    language: str = "en-US"
    timeout_s: float = 10.0
    username: str | None = None
    api_key: str | None = None


@dataclass
class StoreSettings:
    directory: str = "notes"


@dataclass
class ApiSettings:
    logging_config: str = "configs/logging.yaml"
    log_dir: str = "logs"
    cors_origins: List[str] = field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"]
    )


@dataclass
class Settings:
    checker: CheckerSettings = field(default_factory=CheckerSettings)
    notes: StoreSettings = field(default_factory=StoreSettings)
    api: ApiSettings = field(default_factory=ApiSettings)
    recheck_after_apply: bool = True


def config_path() -> str:
    return os.environ.get("NOTECHECK_CONFIG", DEFAULT_CONFIG_PATH)


def load_settings(path: str | None = None) -> Settings:
    path = path or config_path()
    if not os.path.exists(path):
        return Settings()

    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}

    checker_cfg = cfg.get("checker", {}) or {}
    notes_cfg = cfg.get("notes", {}) or {}
    session_cfg = cfg.get("session", {}) or {}
    api_cfg = cfg.get("api", {}) or {}
    api_defaults = ApiSettings()

    return Settings(
        checker=CheckerSettings(
            url=checker_cfg.get("url", DEFAULT_URL),
            language=checker_cfg.get("language", "en-US"),
            timeout_s=float(checker_cfg.get("timeout_s", 10.0)),
            username=checker_cfg.get("username"),
            api_key=checker_cfg.get("api_key"),
        ),
        notes=StoreSettings(directory=str(notes_cfg.get("directory", "notes"))),
        api=ApiSettings(
            logging_config=api_cfg.get("logging_config", api_defaults.logging_config),
            log_dir=api_cfg.get("log_dir", api_defaults.log_dir),
            cors_origins=list(api_cfg.get("cors_origins") or api_defaults.cors_origins),
        ),
        recheck_after_apply=bool(session_cfg.get("recheck_after_apply", True)),
    )
