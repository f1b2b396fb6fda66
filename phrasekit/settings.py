#!/usr/bin/env python3
"""
Package Settings
================
Read-only access to the bundled defaults in configs/app.yaml.

Usage:
    from phrasekit.settings import get_setting

    bits = get_setting("generator.bits", 50.0)
"""

from functools import lru_cache
from pathlib import Path
from typing import Any
import os

import yaml

PACKAGE_ROOT = Path(__file__).resolve().parent
APP_CONFIG_PATH = PACKAGE_ROOT / "configs" / "app.yaml"


@lru_cache(maxsize=1)
def load_app_config() -> dict:
    """Parse app.yaml once per process."""
    if not APP_CONFIG_PATH.is_file():
        raise FileNotFoundError(f"PhraseKit defaults not found: {APP_CONFIG_PATH}")
    with open(APP_CONFIG_PATH, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def get_setting(dotted: str, default: Any = None) -> Any:
    """Look up ``generator.bits`` style keys; ``default`` when any part is missing."""
    node: Any = load_app_config()
    for key in dotted.split('.'):
        if not isinstance(node, dict) or key not in node:
            return default
        node = node[key]
    return node


def resolve_path(value: str) -> Path:
    """Expand ``~`` and anchor relative word-list paths at the working directory."""
    if value is None:
        raise ValueError("path value is required")
    path = Path(os.path.expanduser(str(value)))
    if path.is_absolute():
        return path
    return (Path.cwd() / path).resolve()


__all__ = [
    "load_app_config",
    "get_setting",
    "resolve_path",
    "PACKAGE_ROOT",
    "APP_CONFIG_PATH",
]
