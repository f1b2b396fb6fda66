#!/usr/bin/env python3
"""
PhraseKit - Passphrase Generator
================================

Generates memorable passphrases from random dictionary words, with a
guaranteed minimum entropy. Words are drawn with a bias-free sampler on
top of the system CSPRNG; word and separator entropy is truncated, never
rounded up, so the requested strength is a lower bound.

Quick Start
-----------
    from phrasekit import PassphraseGenerator

    gen = PassphraseGenerator()

    # 50 bits (the default)
    phrase = gen.generate()

    # Stronger, spaces only
    gen.disable_separators = True
    phrase = gen.generate(80)

    # Extra word list
    gen.add_wordlist('/usr/share/dict/words', 'system')

Modules
-------
    phrasekit.generator - Entropy-budgeted passphrase assembly
    phrasekit.sampling  - Uniform sampling over secure random bytes
    phrasekit.modifiers - Word case modifiers
    phrasekit.wordlists - Word list loading
    phrasekit.config    - Configuration (app.yaml, environment)

CLI Usage
---------
    python -m phrasekit generate -b 60 -n 5
    python -m phrasekit info
"""

__version__ = "0.1.0"
__author__ = "PhraseKit"

from .errors import (
    PhraseKitError,
    InvalidArgumentError,
    InsufficientDictionaryError,
    InsufficientEntropyError,
    RangeOverflowError,
    EntropySourceError,
)
from .sampling import (
    SecureByteSource,
    SystemByteSource,
    UniformSampler,
)
from .modifiers import (
    CaseTransform,
    ToggleCaseFirst,
)
from .wordlists import (
    WordlistProvider,
    FilesystemWordlist,
    available_languages,
)
from .generator import (
    PassphraseGenerator,
    EntropyEstimate,
    truncate_bits,
    MIN_ENTROPY_BITS,
    MAX_ENTROPY_BITS,
    DEFAULT_ENTROPY_BITS,
    DEFAULT_SEPARATORS,
)
from .config import (
    GeneratorConfig,
    get_config,
)


def generate(bits: float = None, **overrides) -> str:
    """
    Generate one passphrase using app.yaml and environment settings.

    Parameters
    ----------
    bits : float, optional
        Entropy target (default from config, normally 50)
    **overrides
        GeneratorConfig fields, e.g. ``disable_separators=True``
    """
    config = get_config(**overrides)
    gen = PassphraseGenerator.from_config(config)
    return gen.generate(config.bits if bits is None else bits)


__all__ = [
    '__version__',
    'generate',
    # Generator
    'PassphraseGenerator',
    'EntropyEstimate',
    'truncate_bits',
    'MIN_ENTROPY_BITS',
    'MAX_ENTROPY_BITS',
    'DEFAULT_ENTROPY_BITS',
    'DEFAULT_SEPARATORS',
    # Collaborators
    'SecureByteSource',
    'SystemByteSource',
    'UniformSampler',
    'CaseTransform',
    'ToggleCaseFirst',
    'WordlistProvider',
    'FilesystemWordlist',
    'available_languages',
    # Config
    'GeneratorConfig',
    'get_config',
    # Errors
    'PhraseKitError',
    'InvalidArgumentError',
    'InsufficientDictionaryError',
    'InsufficientEntropyError',
    'RangeOverflowError',
    'EntropySourceError',
]
