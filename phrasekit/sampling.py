#!/usr/bin/env python3
"""
Uniform Sampling
================
Turns cryptographically secure random bytes into uniformly distributed
integers without modulo bias.

Features:
- Pluggable secure byte source (``secrets.token_bytes()`` by default)
- Rejection sampling over a masked bit range
- The "modulo trick" (Ferguson, Schneier & Kohno) to keep the rejection
  probability low: the accepted range is the largest multiple of the pool
  size that fits below a large power of two, so most draws are kept

Usage:
    from phrasekit.sampling import UniformSampler

    sampler = UniformSampler()
    index = sampler.get_element(len(words))
"""

import logging
import secrets
import sys
from typing import Optional, Protocol, runtime_checkable

from .errors import EntropySourceError, InvalidArgumentError, RangeOverflowError

logger = logging.getLogger(__name__)

MAX_ALLOWED_POOL_SIZE = 1048576         # 2^20
MAX_ALLOWED_POWER_OF_TWO = 67108864     # 2^26
MIN_POOL_SIZE = 2


# =============================================================================
# Secure Byte Sources
# =============================================================================

@runtime_checkable
class SecureByteSource(Protocol):
    """Anything that can hand out ``count`` cryptographically secure bytes."""

    def get_bytes(self, count: int) -> bytes:
        ...


class SystemByteSource:
    """Byte source backed by the operating system CSPRNG."""

    def get_bytes(self, count: int) -> bytes:
        if count < 1:
            raise InvalidArgumentError(f"Byte count must be positive, got {count}")
        try:
            return secrets.token_bytes(count)
        except (NotImplementedError, OSError) as e:
            raise EntropySourceError(f"Secure random source unavailable: {e}") from e


# =============================================================================
# Uniform Sampler
# =============================================================================

class UniformSampler:
    """
    Uniform integer sampler over ``[0, pool_size)``.

    ``power_of_two`` must be a power of two and at least ``max_pool_size``.
    For efficiency it should be considerably greater than any pool size
    in use: with the defaults (2^20 pool, 2^26 range) a draw is rejected
    with probability below 2^-6 even for the largest pool.
    """

    def __init__(self,
                 byte_source: Optional[SecureByteSource] = None,
                 max_pool_size: int = MAX_ALLOWED_POOL_SIZE,
                 power_of_two: int = MAX_ALLOWED_POWER_OF_TWO):
        self._byte_source = byte_source if byte_source is not None else SystemByteSource()
        self.check_power_of_two(power_of_two, max_pool_size)
        self._max_pool_size = max_pool_size
        self._power_of_two = power_of_two

    @property
    def byte_source(self) -> SecureByteSource:
        return self._byte_source

    @property
    def max_pool_size(self) -> int:
        return self._max_pool_size

    @property
    def power_of_two(self) -> int:
        return self._power_of_two

    def get_element(self, pool_size: int) -> int:
        """
        Return an integer in ``[0, pool_size)`` chosen uniformly at random.

        Pool size 2 yields 0 or 1, pool size 3 yields 0, 1 or 2, and so on.

        Raises:
            InvalidArgumentError: If pool_size is not in [2, max_pool_size]
            RangeOverflowError: If the sampling range exceeds a machine integer
            EntropySourceError: If the byte source fails
        """
        if pool_size < MIN_POOL_SIZE or pool_size > self._max_pool_size:
            raise InvalidArgumentError(
                f"pool_size must be between {MIN_POOL_SIZE} and {self._max_pool_size}, "
                f"got {pool_size}"
            )

        q = self._power_of_two // pool_size
        upper = pool_size * q - 1

        if upper > sys.maxsize:
            raise RangeOverflowError("The supplied range is too great to generate")

        # bit_length() == floor(log2(upper)) + 1 for upper >= 1, without float error
        bits = upper.bit_length()
        byte_count = max((bits + 7) // 8, 1)
        mask = (1 << bits) - 1

        while True:
            result = int.from_bytes(self._byte_source.get_bytes(byte_count), 'big') & mask
            if result <= upper:
                return result % pool_size

    def check_power_of_two(self,
                           power_of_two: Optional[int] = None,
                           max_pool_size: Optional[int] = None) -> bool:
        """
        Validate a (power_of_two, max_pool_size) pair.

        Missing values fall back to the current configuration.

        Raises:
            InvalidArgumentError: On any violated invariant
        """
        if max_pool_size is None:
            max_pool_size = self._max_pool_size
        if power_of_two is None:
            power_of_two = self._power_of_two

        if max_pool_size < MIN_POOL_SIZE:
            raise InvalidArgumentError(f"max_pool_size must be at least {MIN_POOL_SIZE}")

        if max_pool_size > power_of_two:
            raise InvalidArgumentError("power_of_two must be >= max_pool_size")

        if max_pool_size > MAX_ALLOWED_POOL_SIZE:
            raise InvalidArgumentError(
                f"max_pool_size can not be greater than {MAX_ALLOWED_POOL_SIZE}"
            )

        if power_of_two > MAX_ALLOWED_POWER_OF_TWO:
            raise InvalidArgumentError(
                f"power_of_two can not be greater than {MAX_ALLOWED_POWER_OF_TWO}"
            )

        if power_of_two <= 0 or power_of_two & (power_of_two - 1):
            raise InvalidArgumentError(f"{power_of_two} is not a power of two")

        return True

    def set_power_of_two(self, power_of_two: int) -> None:
        self.check_power_of_two(power_of_two=power_of_two)
        self._power_of_two = power_of_two
        logger.debug(f"Sampler power_of_two set to {power_of_two}")

    def set_max_pool_size(self, max_pool_size: int) -> None:
        self.check_power_of_two(max_pool_size=max_pool_size)
        self._max_pool_size = max_pool_size
        logger.debug(f"Sampler max_pool_size set to {max_pool_size}")


__all__ = [
    'SecureByteSource',
    'SystemByteSource',
    'UniformSampler',
    'MAX_ALLOWED_POOL_SIZE',
    'MAX_ALLOWED_POWER_OF_TWO',
]
