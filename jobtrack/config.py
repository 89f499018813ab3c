"""Load tracker settings and env configuration."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from jobtrack.log import get_logger

log = get_logger(__name__)

load_dotenv()

ROOT_DIR: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT_DIR / "config"
SETTINGS_PATH: Path = CONFIG_DIR / "settings.yaml"

DEFAULT_SETTINGS: dict[str, Any] = {
    "storage_key": "fedtech-jobs",
    "seed_samples": True,
    "ocr": {
        "language": "eng",
        "tesseract_cmd": "",
    },
}


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def data_dir() -> Path:
    """Directory holding the job snapshot; JOBTRACK_DATA_DIR wins over the repo default."""
    override = get_env("JOBTRACK_DATA_DIR")
    return Path(override) if override else ROOT_DIR / "data"


DATA_DIR: Path = data_dir()


def load_settings(path: Path | None = None) -> dict[str, Any]:
    path = path or SETTINGS_PATH
    data: dict[str, Any] = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    else:
        log.debug("No settings file at %s, using defaults", path)

    settings = dict(DEFAULT_SETTINGS)
    settings.update({k: v for k, v in data.items() if k != "ocr"})
    settings["ocr"] = {**DEFAULT_SETTINGS["ocr"], **(data.get("ocr") or {})}

    # Env overrides for deployments that can't ship a settings file
    if get_env("OCR_LANGUAGE"):
        settings["ocr"]["language"] = get_env("OCR_LANGUAGE")
    if get_env("TESSERACT_CMD"):
        settings["ocr"]["tesseract_cmd"] = get_env("TESSERACT_CMD")
    if get_env("JOBTRACK_STORAGE_KEY"):
        settings["storage_key"] = get_env("JOBTRACK_STORAGE_KEY")

    return settings


def ensure_dirs() -> None:
    for d in (CONFIG_DIR, data_dir()):
        d.mkdir(parents=True, exist_ok=True)
