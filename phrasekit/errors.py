#!/usr/bin/env python3
"""
Error Taxonomy
==============
Every failure raised by phrasekit derives from PhraseKitError, and also
from the builtin exception that best describes it, so callers may catch
either ``PhraseKitError`` or e.g. ``ValueError``.

    PhraseKitError
    ├── InvalidArgumentError         (ValueError)
    ├── InsufficientDictionaryError  (RuntimeError)
    ├── InsufficientEntropyError     (RuntimeError)
    ├── RangeOverflowError           (OverflowError)
    └── EntropySourceError           (RuntimeError)
"""


class PhraseKitError(Exception):
    """Base class for all phrasekit errors."""


class InvalidArgumentError(PhraseKitError, ValueError):
    """Bad entropy target, separator alphabet or sampler configuration."""


class InsufficientDictionaryError(PhraseKitError, RuntimeError):
    """The word list has fewer unique words than required."""


class InsufficientEntropyError(PhraseKitError, RuntimeError):
    """A single word carries less than one bit of entropy."""


class RangeOverflowError(PhraseKitError, OverflowError):
    """The sampler range does not fit into a machine integer."""


class EntropySourceError(PhraseKitError, RuntimeError):
    """The platform's secure random source is unavailable."""


__all__ = [
    'PhraseKitError',
    'InvalidArgumentError',
    'InsufficientDictionaryError',
    'InsufficientEntropyError',
    'RangeOverflowError',
    'EntropySourceError',
]
