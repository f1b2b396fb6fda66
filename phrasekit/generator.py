#!/usr/bin/env python3
"""
Passphrase Generator
====================
Builds passphrases from random dictionary words until a requested amount
of entropy is reached.

Entropy accounting:
- Each word contributes log2(unique words x modifier multiplier) bits
- Each drawn separator contributes log2(unique separator characters) bits
- Both values are truncated to two decimals, never rounded up, so the
  achieved entropy is never overstated
- Separators are only used when they reduce the number of words needed,
  unless forced on or off

The base logic is adapted from passwdqc's pwqgen program by Solar Designer
(http://www.openwall.com/passwdqc/).

Usage:
    from phrasekit.generator import PassphraseGenerator

    gen = PassphraseGenerator()
    phrase = gen.generate(50)
"""

import logging
import math
from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal
from pathlib import Path
from typing import List, Optional, Union

from .errors import InsufficientDictionaryError, InsufficientEntropyError, InvalidArgumentError
from .modifiers import CaseTransform, ToggleCaseFirst
from .sampling import UniformSampler
from .wordlists import FilesystemWordlist, WordlistProvider

logger = logging.getLogger(__name__)

MIN_WORD_COUNT = 2
MIN_ENTROPY_BITS = 26.0
MAX_ENTROPY_BITS = 120.0
DEFAULT_ENTROPY_BITS = 50.0
DEFAULT_SEPARATORS = '-_!$&*+=23456789'
DEFAULT_ENCODING = 'utf-8'

_TWO_PLACES = Decimal('0.01')


def truncate_bits(value: float) -> float:
    """
    Truncate ``value`` to two decimal digits without ever rounding up.

    Decimal(float) is the exact binary value, so log2(49667), which is
    15.5999..., becomes 15.59 and not 15.6.
    """
    return float(Decimal(value).quantize(_TWO_PLACES, rounding=ROUND_DOWN))


def unique_characters(text: str) -> str:
    """De-duplicate characters, keeping first-occurrence order."""
    return ''.join(dict.fromkeys(text))


@dataclass(frozen=True)
class EntropyEstimate:
    """Entropy figures the generator will use for a given target."""
    target_bits: float
    word_count: int
    multiplier: int
    word_bits: float
    separators: str
    separator_bits: float
    use_separators: bool

    @property
    def effective_word_count(self) -> int:
        return self.word_count * self.multiplier


class PassphraseGenerator:
    """
    Generates passphrases with at least the requested entropy.

    Collaborators are injected and default to the filesystem word list,
    the first-letter case toggle and a ``UniformSampler`` over the system
    CSPRNG.

    Examples
    --------
        >>> gen = PassphraseGenerator()
        >>> gen.generate(50)
        'cactus Oyster-Lemon harbor ...'

        >>> gen = PassphraseGenerator(disable_separators=True)
        >>> gen.add_wordlist('/usr/share/dict/words', 'system')
    """

    def __init__(self,
                 wordlist: Optional[WordlistProvider] = None,
                 modifier: Optional[CaseTransform] = None,
                 sampler: Optional[UniformSampler] = None,
                 *,
                 separators: str = DEFAULT_SEPARATORS,
                 encoding: str = DEFAULT_ENCODING,
                 always_use_separators: bool = False,
                 disable_separators: bool = False,
                 disable_word_modifier: bool = False):
        self._sampler = sampler if sampler is not None else UniformSampler()
        self._wordlist = wordlist if wordlist is not None else FilesystemWordlist(encoding=encoding)
        self._modifier = modifier if modifier is not None else ToggleCaseFirst(self._sampler)

        self._separators = str(separators)
        self.encoding = encoding
        self.always_use_separators = bool(always_use_separators)
        self.disable_separators = bool(disable_separators)
        self.disable_word_modifier = bool(disable_word_modifier)

    @classmethod
    def from_config(cls, config) -> 'PassphraseGenerator':
        """Build a generator and its collaborators from a GeneratorConfig."""
        sampler = UniformSampler(
            max_pool_size=config.max_pool_size,
            power_of_two=config.power_of_two,
        )

        wordlist = None
        for identifier, path in config.wordlists.items():
            if wordlist is None:
                wordlist = FilesystemWordlist((path, identifier), encoding=config.encoding)
            else:
                wordlist.add_wordlist(path, identifier)

        modifier = ToggleCaseFirst(
            sampler,
            probability_pool_size=config.probability_pool_size,
            word_count_multiplier=config.word_count_multiplier,
        )

        return cls(
            wordlist,
            modifier,
            sampler,
            separators=config.separators,
            encoding=config.encoding,
            always_use_separators=config.always_use_separators,
            disable_separators=config.disable_separators,
            disable_word_modifier=config.disable_word_modifier,
        )

    # -------------------------------------------------------------------------
    # Collaborators
    # -------------------------------------------------------------------------

    @property
    def wordlist(self) -> WordlistProvider:
        return self._wordlist

    @property
    def modifier(self) -> CaseTransform:
        return self._modifier

    @property
    def sampler(self) -> UniformSampler:
        return self._sampler

    def add_wordlist(self, path: Union[str, Path], identifier: str) -> None:
        self._wordlist.add_wordlist(path, identifier)

    def remove_wordlist(self, identifier: str) -> None:
        self._wordlist.remove_wordlist(identifier)

    # -------------------------------------------------------------------------
    # Separators
    # -------------------------------------------------------------------------

    @property
    def separators(self) -> str:
        return self.get_separators()

    @separators.setter
    def separators(self, value: str) -> None:
        self.set_separators(value)

    def set_separators(self, separators: str) -> None:
        """Set the separator characters, e.g. ``'123456789-'``."""
        self._separators = str(separators)

    def get_separators(self) -> str:
        """
        Return the unique separator characters in first-occurrence order.

        Raises:
            InvalidArgumentError: If no separator character is configured,
                or one is not a single-byte character in the encoding
        """
        unique = unique_characters(self._separators)
        if not unique:
            raise InvalidArgumentError(
                "Separator characters must contain at least one unique character."
            )
        for char in unique:
            try:
                size = len(char.encode(self.encoding))
            except LookupError:
                raise InvalidArgumentError(f"Unknown encoding: {self.encoding!r}") from None
            except UnicodeEncodeError:
                size = 0
            if size != 1:
                raise InvalidArgumentError(
                    f"Separator {char!r} is not a single-byte character in {self.encoding}"
                )
        return unique

    @staticmethod
    def makes_sense_to_use_separators(bits: float, word_bits: float, separator_bits: float) -> bool:
        """
        Whether separators reduce the number of words needed for ``bits``.

        If they don't, they only make the passphrase longer.
        """
        word_count = 1 + (bits + ((word_bits + separator_bits - 1) - word_bits)) / (word_bits + separator_bits)
        return int((bits + (word_bits - 1)) / word_bits) != int(word_count)

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    def estimate(self, bits: float = DEFAULT_ENTROPY_BITS) -> EntropyEstimate:
        """
        Validate the configuration and compute the entropy figures for ``bits``.

        Raises:
            InvalidArgumentError: If bits is out of range or the separators are invalid
            InsufficientDictionaryError: If the word list has fewer than 2 words
            InsufficientEntropyError: If a word is worth less than one bit
        """
        estimate, _ = self._prepare(bits)
        return estimate

    def generate(self, bits: float = DEFAULT_ENTROPY_BITS) -> str:
        """
        Generate a passphrase with at least ``bits`` bits of entropy.

        Raises:
            InvalidArgumentError: If bits is not in [26.0, 120.0] or the
                separators are invalid
            InsufficientDictionaryError: If the word list has fewer than 2 words
            InsufficientEntropyError: If a word is worth less than one bit
            EntropySourceError: If secure random bytes are unavailable
        """
        estimate, words = self._prepare(bits)

        remaining = estimate.target_bits
        word_bits = estimate.word_bits
        separators = estimate.separators
        separator_bits = estimate.separator_bits
        use_modifier = not self.disable_word_modifier

        parts = []
        while True:
            word = words[self._sampler.get_element(len(words))]
            if use_modifier:
                word = self._modifier.modify(word, self.encoding)
            parts.append(word)
            remaining -= word_bits

            if remaining > separator_bits and estimate.use_separators:
                if len(separators) > 1:
                    parts.append(separators[self._sampler.get_element(len(separators))])
                    remaining -= separator_bits
                else:
                    # A lone separator carries no randomness
                    parts.append(separators)
            elif remaining > 0.0:
                parts.append(' ')

            if remaining <= 0.0:
                break

        return ''.join(parts)

    def _prepare(self, bits: float):
        bits = float(bits)
        # NaN fails every comparison
        if not (MIN_ENTROPY_BITS <= bits <= MAX_ENTROPY_BITS):
            raise InvalidArgumentError(
                f"bits must be between {MIN_ENTROPY_BITS} and {MAX_ENTROPY_BITS}, got {bits}"
            )

        separators = self.get_separators()
        separator_bits = truncate_bits(math.log2(len(separators)))

        words: List[str] = self._wordlist.get_words_as_list()
        count = len(words)
        if count < MIN_WORD_COUNT:
            raise InsufficientDictionaryError(
                f"Wordlist must have at least {MIN_WORD_COUNT} unique words"
            )

        multiplier = 1 if self.disable_word_modifier else self._modifier.get_word_count_multiplier()
        effective = count * multiplier
        word_bits = truncate_bits(math.log2(effective)) if effective > 0 else 0.0
        if word_bits < 1:
            raise InsufficientEntropyError(
                "Words do not have enough bits to create a passphrase"
            )

        if self.disable_separators:
            use_separators = False
        elif self.always_use_separators:
            use_separators = True
        else:
            use_separators = self.makes_sense_to_use_separators(bits, word_bits, separator_bits)

        logger.debug(
            f"Entropy setup: {count} words x{multiplier} = {word_bits} bits/word, "
            f"{len(separators)} separators = {separator_bits} bits, "
            f"use_separators={use_separators}"
        )

        estimate = EntropyEstimate(
            target_bits=bits,
            word_count=count,
            multiplier=multiplier,
            word_bits=word_bits,
            separators=separators,
            separator_bits=separator_bits,
            use_separators=use_separators,
        )
        return estimate, words


__all__ = [
    'PassphraseGenerator',
    'EntropyEstimate',
    'truncate_bits',
    'unique_characters',
    'MIN_WORD_COUNT',
    'MIN_ENTROPY_BITS',
    'MAX_ENTROPY_BITS',
    'DEFAULT_ENTROPY_BITS',
    'DEFAULT_SEPARATORS',
    'DEFAULT_ENCODING',
]
