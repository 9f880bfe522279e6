from __future__ import annotations
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional
import logging
import os

import yaml

from hoshin_compass.wizard import WIZARD_MODES

logger = logging.getLogger(__name__)

DEFAULT_STORE_DIR = "~/.hoshin"


@dataclass
class HoshinConfig:
    """Runtime settings for the CLI and the Streamlit page."""
    store_dir: str = DEFAULT_STORE_DIR
    wizard_mode: str = "unset_only"
    log_level: str = "WARNING"


def load_config(path: Optional[str] = None) -> HoshinConfig:
    raw: Dict[str, Any] = {}
    if path:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

    known = {f.name for f in fields(HoshinConfig)}
    for key in sorted(set(raw) - known):
        logger.warning(f"Ignoring unknown config key: {key}")
    cfg = HoshinConfig(**{k: str(v) for k, v in raw.items() if k in known})

    # environment wins over the file
    cfg.store_dir = os.environ.get("HOSHIN_STORE_DIR", cfg.store_dir)
    cfg.log_level = os.environ.get("HOSHIN_LOG_LEVEL", cfg.log_level).upper()

    if cfg.wizard_mode not in WIZARD_MODES:
        raise ValueError(f"wizard_mode must be one of {', '.join(WIZARD_MODES)}, got {cfg.wizard_mode!r}")
    return cfg
