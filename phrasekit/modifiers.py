#!/usr/bin/env python3
"""
Word Modifiers
==============
Random transformations applied to each chosen word. A modifier inflates
the effective dictionary size, which the generator accounts for through
``get_word_count_multiplier()``.
"""

from typing import Optional, Protocol, Union, runtime_checkable

from .sampling import UniformSampler


@runtime_checkable
class CaseTransform(Protocol):
    """A word modifier with a known entropy contribution."""

    def modify(self, word: str, encoding: str = 'utf-8') -> str:
        ...

    def get_word_count_multiplier(self) -> int:
        ...


class ToggleCaseFirst:
    """
    Toggle the case of a word's first character, at random.

    A number is drawn from ``[0, probability_pool_size)``; on 0 the word is
    modified. The default pool of 2 gives a 50:50 chance, a pool of 3 a 1/3
    chance, and so on.

    Each word then has two distinguishable variants, hence the default
    multiplier of 2. A custom probability pool does not change how many
    variants exist, only how likely they are; pass a smaller multiplier if
    the skew should be accounted for.
    """

    def __init__(self,
                 sampler: Optional[UniformSampler] = None,
                 probability_pool_size: int = 2,
                 word_count_multiplier: int = 2):
        self._sampler = sampler if sampler is not None else UniformSampler()
        self.probability_pool_size = probability_pool_size
        self.word_count_multiplier = word_count_multiplier

    def modify(self, word: Union[str, bytes], encoding: str = 'utf-8') -> Union[str, bytes]:
        """
        Return ``word`` with the first character's case possibly toggled.

        Text is handled per character, never per byte; ``bytes`` input is
        decoded with ``encoding`` and re-encoded afterwards.
        """
        if isinstance(word, bytes):
            return self.modify(word.decode(encoding), encoding).encode(encoding)

        if not word:
            return word

        if self._sampler.get_element(self.probability_pool_size) != 0:
            return word

        first = word[0]
        upper = first.upper()
        # upper() may expand a character ('ß' -> 'SS'); that still counts as raising
        toggled = first.lower() if first == upper else upper
        return toggled + word[1:]

    def get_word_count_multiplier(self) -> int:
        return self.word_count_multiplier


__all__ = [
    'CaseTransform',
    'ToggleCaseFirst',
]
