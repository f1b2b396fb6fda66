"""
Tests for Uniform Sampling
==========================
Tests for UniformSampler and SystemByteSource in phrasekit/sampling.py.
"""

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from phrasekit import sampling
from phrasekit.errors import EntropySourceError, InvalidArgumentError
from phrasekit.sampling import SecureByteSource, SystemByteSource, UniformSampler


class CountingBytes:
    """Byte source returning 0, 1, 2, ... as big-endian integers."""

    def __init__(self):
        self.number = 0
        self.requests = []

    def get_bytes(self, count: int) -> bytes:
        self.requests.append(count)
        value = self.number
        self.number += 1
        return value.to_bytes(count, 'big')


class FixedBytes:
    """Byte source replaying a fixed sequence of single-byte values."""

    def __init__(self, values):
        self.values = list(values)

    def get_bytes(self, count: int) -> bytes:
        return bytes([self.values.pop(0)]) * count


class TestPoolValidation:
    """Tests for pool size and configuration checks."""

    def test_too_low_pool_size(self):
        with pytest.raises(InvalidArgumentError):
            UniformSampler().get_element(1)

    def test_too_high_pool_size(self):
        with pytest.raises(InvalidArgumentError):
            UniformSampler().get_element(1048577)

    def test_pool_size_above_configured_max(self):
        sampler = UniformSampler()
        sampler.set_max_pool_size(100)
        with pytest.raises(InvalidArgumentError):
            sampler.get_element(101)

    def test_power_of_two_below_max_pool_size(self):
        with pytest.raises(InvalidArgumentError):
            UniformSampler().set_power_of_two(8)

    def test_power_of_two_too_high(self):
        with pytest.raises(InvalidArgumentError):
            UniformSampler().set_power_of_two(67108865)

    def test_not_a_power_of_two(self):
        sampler = UniformSampler(max_pool_size=1000, power_of_two=1024)
        with pytest.raises(InvalidArgumentError):
            sampler.set_power_of_two(1536)

    def test_zero_power_of_two(self):
        with pytest.raises(InvalidArgumentError):
            UniformSampler(max_pool_size=2, power_of_two=0)

    def test_max_pool_size_too_high(self):
        with pytest.raises(InvalidArgumentError):
            UniformSampler().set_max_pool_size(1048577)

    def test_max_pool_size_too_low(self):
        with pytest.raises(InvalidArgumentError):
            UniformSampler().set_max_pool_size(1)

    def test_valid_configuration(self):
        sampler = UniformSampler()
        sampler.set_max_pool_size(7776)
        sampler.set_power_of_two(8192)
        assert sampler.max_pool_size == 7776
        assert sampler.power_of_two == 8192
        assert sampler.check_power_of_two() is True

    def test_failed_setter_keeps_previous_value(self):
        sampler = UniformSampler()
        with pytest.raises(InvalidArgumentError):
            sampler.set_power_of_two(8)
        assert sampler.power_of_two == 67108864


class TestGetElement:
    """Tests for UniformSampler.get_element()."""

    def test_uniform_distribution(self):
        """Consecutive byte values map to every element exactly once."""
        pool_size = 7776
        sampler = UniformSampler(CountingBytes())
        sampler.set_max_pool_size(pool_size)
        sampler.set_power_of_two(8192)

        elements = {}
        for _ in range(pool_size):
            element = sampler.get_element(pool_size)
            elements[element] = elements.get(element, 0) + 1

        assert len(elements) == pool_size
        assert set(elements.values()) == {1}

    def test_requests_minimal_byte_count(self):
        source = CountingBytes()
        sampler = UniformSampler(source, max_pool_size=7776, power_of_two=8192)
        sampler.get_element(7776)
        # range 7775 needs 13 bits
        assert source.requests == [2]

    def test_single_byte_for_small_range(self):
        source = CountingBytes()
        sampler = UniformSampler(source, max_pool_size=2, power_of_two=2)
        assert sampler.get_element(2) == 0
        assert sampler.get_element(2) == 1
        assert source.requests == [1, 1]

    def test_rejects_values_above_range(self):
        # pool 3, power 4: range = 2, mask = 3
        sampler = UniformSampler(FixedBytes([3, 1]), max_pool_size=3, power_of_two=4)
        assert sampler.get_element(3) == 1

    def test_mask_drops_high_bits(self):
        # 0xFF & 3 == 3 is rejected, 0x06 & 3 == 2 is accepted
        sampler = UniformSampler(FixedBytes([0xFF, 0x06]), max_pool_size=3, power_of_two=4)
        assert sampler.get_element(3) == 2

    def test_modulo_reduction(self):
        # pool 3, power 8: q = 2, range = 5, value 4 -> 4 % 3
        sampler = UniformSampler(FixedBytes([4]), max_pool_size=3, power_of_two=8)
        assert sampler.get_element(3) == 1

    def test_results_within_pool(self):
        sampler = UniformSampler()
        results = {sampler.get_element(10) for _ in range(500)}
        assert results <= set(range(10))
        assert len(results) > 1

    def test_byte_source_errors_propagate(self):
        class BrokenBytes:
            def get_bytes(self, count):
                raise EntropySourceError("no entropy")

        with pytest.raises(EntropySourceError):
            UniformSampler(BrokenBytes()).get_element(10)


class TestSystemByteSource:
    """Tests for the CSPRNG-backed byte source."""

    def test_returns_requested_length(self):
        assert len(SystemByteSource().get_bytes(16)) == 16

    def test_implements_protocol(self):
        assert isinstance(SystemByteSource(), SecureByteSource)

    def test_rejects_non_positive_count(self):
        with pytest.raises(InvalidArgumentError):
            SystemByteSource().get_bytes(0)

    def test_unavailable_source(self, monkeypatch):
        def broken(count):
            raise NotImplementedError("no urandom")

        monkeypatch.setattr(sampling.secrets, "token_bytes", broken)
        with pytest.raises(EntropySourceError):
            SystemByteSource().get_bytes(4)

    def test_default_sampler_uses_system_source(self):
        assert isinstance(UniformSampler().byte_source, SystemByteSource)
