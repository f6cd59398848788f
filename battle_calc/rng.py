"""Seedable dice source for combat simulation.

SplitMix64 stream plus an unbiased bounded-integer draw.  Two generators
built from the same seed yield identical dice, which is what makes a
simulation reproducible.
"""
from __future__ import annotations

import secrets

_MASK64 = (1 << 64) - 1
_GOLDEN_GAMMA = 0x9E3779B97F4A7C15
_MIX_1 = 0xBF58476D1CE4E5B9
_MIX_2 = 0x94D049BB133111EB


def fresh_seed() -> int:
    """Pick a non-reproducible 64-bit seed from OS entropy."""

    return secrets.randbits(64)


class SeededRNG:
    """SplitMix64 generator.  Single-owner, not thread safe."""

    def __init__(self, seed: int) -> None:
        self.seed = int(seed) & _MASK64
        self._state = self.seed

    def next_u64(self) -> int:
        self._state = (self._state + _GOLDEN_GAMMA) & _MASK64
        z = self._state
        z = ((z ^ (z >> 30)) * _MIX_1) & _MASK64
        z = ((z ^ (z >> 27)) * _MIX_2) & _MASK64
        return z ^ (z >> 31)

    def _below(self, bound: int) -> int:
        # multiply-high with rejection of the biased low band
        m = self.next_u64() * bound
        low = m & _MASK64
        if low < bound:
            threshold = ((1 << 64) - bound) % bound
            while low < threshold:
                m = self.next_u64() * bound
                low = m & _MASK64
        return m >> 64

    def randint(self, low: int, high: int) -> int:
        """Uniform integer in ``[low, high]``, both ends inclusive."""

        if high < low:
            raise ValueError(f"empty range [{low}, {high}]")
        span = high - low + 1
        if span > _MASK64 + 1:
            raise ValueError("range wider than 64 bits")
        if span == _MASK64 + 1:
            return low + self.next_u64()
        return low + self._below(span)

    def roll_d10(self) -> int:
        return self.randint(1, 10)


__all__ = ["SeededRNG", "fresh_seed"]
