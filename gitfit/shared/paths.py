from __future__ import annotations

import os
from pathlib import Path

APP_NAME = "GitFit"

def app_data_dir() -> Path:
    base = os.environ.get("GITFIT_HOME")
    if base:
        return Path(base)
    return Path.home() / "Library" / "Application Support" / APP_NAME

def config_path() -> Path:
    return app_data_dir() / "config.json"

def logs_dir() -> Path:
    return app_data_dir() / "logs"

def log_path() -> Path:
    return logs_dir() / "gitfit.log"

def ensure_app_dirs() -> None:
    app_data_dir().mkdir(parents=True, exist_ok=True)
    logs_dir().mkdir(parents=True, exist_ok=True)
