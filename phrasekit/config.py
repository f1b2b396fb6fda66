#!/usr/bin/env python3
"""
Configuration Management
========================
Resolves generator settings from three layers, lowest priority first:

1. configs/app.yaml (package defaults)
2. PHRASEKIT_* variables from a .env file, then from the process environment
3. Explicit overrides (e.g. CLI flags)
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from .errors import InvalidArgumentError
from .settings import get_setting, resolve_path

ENV_PREFIX = 'PHRASEKIT_'

_TRUE_VALUES = {'1', 'true', 'yes', 'on'}
_FALSE_VALUES = {'0', 'false', 'no', 'off', ''}


def parse_bool(value: str) -> bool:
    """Parse an environment flag (1/true/yes/on, 0/false/no/off)."""
    normalized = str(value).strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise InvalidArgumentError(f"Invalid boolean value: {value!r}")


def normalize_wordlist_path(value) -> str:
    """Keep bare file names (bundled lists) as-is, resolve real paths."""
    text = str(value)
    if os.sep in text or (os.altsep and os.altsep in text):
        return str(resolve_path(text))
    return text


# =============================================================================
# Generator Configuration
# =============================================================================

@dataclass
class GeneratorConfig:
    """Generator configuration. Unset fields are filled from app.yaml."""
    bits: Optional[float] = None
    separators: Optional[str] = None
    encoding: Optional[str] = None
    always_use_separators: Optional[bool] = None
    disable_separators: Optional[bool] = None
    disable_word_modifier: Optional[bool] = None
    wordlists: Dict[str, str] = field(default_factory=dict)

    # Sampler
    max_pool_size: Optional[int] = None
    power_of_two: Optional[int] = None

    # Word modifier
    probability_pool_size: Optional[int] = None
    word_count_multiplier: Optional[int] = None

    def __post_init__(self):
        gen = get_setting("generator", {}) or {}
        if self.bits is None:
            self.bits = gen.get("bits")
        if self.separators is None:
            self.separators = gen.get("separators")
        if self.encoding is None:
            self.encoding = gen.get("encoding")
        if self.always_use_separators is None:
            self.always_use_separators = gen.get("always_use_separators", False)
        if self.disable_separators is None:
            self.disable_separators = gen.get("disable_separators", False)
        if self.disable_word_modifier is None:
            self.disable_word_modifier = gen.get("disable_word_modifier", False)

        if not self.wordlists:
            self.wordlists = dict(get_setting("wordlists", {}) or {})

        sampler = get_setting("sampler", {}) or {}
        if self.max_pool_size is None:
            self.max_pool_size = sampler.get("max_pool_size")
        if self.power_of_two is None:
            self.power_of_two = sampler.get("power_of_two")

        modifier = get_setting("modifier", {}) or {}
        if self.probability_pool_size is None:
            self.probability_pool_size = modifier.get("probability_pool_size")
        if self.word_count_multiplier is None:
            self.word_count_multiplier = modifier.get("word_count_multiplier")

        missing = [
            name for name, value in (
                ("bits", self.bits),
                ("separators", self.separators),
                ("encoding", self.encoding),
                ("max_pool_size", self.max_pool_size),
                ("power_of_two", self.power_of_two),
                ("probability_pool_size", self.probability_pool_size),
                ("word_count_multiplier", self.word_count_multiplier),
            ) if value is None
        ]
        if missing:
            raise ValueError(f"Missing settings in app.yaml: {', '.join(missing)}")
        if not self.wordlists:
            raise ValueError("At least one wordlist must be configured in app.yaml")

        self.bits = float(self.bits)
        self.separators = str(self.separators)
        self.wordlists = {
            str(identifier): normalize_wordlist_path(path)
            for identifier, path in self.wordlists.items()
        }


def load_env(env_path: Path = None) -> dict:
    """Load PHRASEKIT_* variables from a .env file (default: ./.env)."""
    if env_path is None:
        env_path = Path.cwd() / '.env'

    env_vars = {}
    if env_path.exists():
        for line in env_path.read_text().splitlines():
            line = line.strip()
            if '=' in line and not line.startswith('#'):
                key, value = line.split('=', 1)
                key, value = key.strip(), value.strip()
                if key.startswith(ENV_PREFIX):
                    env_vars[key] = value

    return env_vars


def _from_env(env: dict) -> dict:
    def lookup(name):
        return os.environ.get(ENV_PREFIX + name, env.get(ENV_PREFIX + name))

    values = {}
    bits = lookup('BITS')
    if bits is not None:
        try:
            values['bits'] = float(bits)
        except ValueError:
            raise InvalidArgumentError(f"{ENV_PREFIX}BITS must be a number, got {bits!r}") from None

    for key in ('SEPARATORS', 'ENCODING'):
        value = lookup(key)
        if value is not None:
            values[key.lower()] = value

    for key in ('ALWAYS_USE_SEPARATORS', 'DISABLE_SEPARATORS', 'DISABLE_WORD_MODIFIER'):
        value = lookup(key)
        if value is not None:
            values[key.lower()] = parse_bool(value)

    return values


def get_config(env_path: Path = None, **overrides) -> GeneratorConfig:
    """
    Get generator configuration.

    Args:
        env_path: Optional .env file with PHRASEKIT_* variables
        **overrides: GeneratorConfig fields; None values are ignored

    Returns:
        GeneratorConfig with app.yaml defaults, env and overrides applied
    """
    env = load_env(env_path)

    values = _from_env(env)
    values.update({k: v for k, v in overrides.items() if v is not None})
    return GeneratorConfig(**values)


__all__ = [
    'GeneratorConfig',
    'get_config',
    'load_env',
    'parse_bool',
    'ENV_PREFIX',
]
