"""Domain-separated deterministic RNG using xxhash.

A roll depends ONLY on the seed, the domain, the character key and a
per-character counter (for example the number of casts attempted), so
replaying the same operations reproduces the same dice.

Formula: RNG_Value = Hash(Seed, Domain, CharacterKey, Counter)
"""

from __future__ import annotations

import struct

import xxhash

from epic_progression.core.enums import Domain


def character_key(character_id: str) -> int:
    """Stable 31-bit integer key for a character id."""
    return xxhash.xxh32(character_id.encode("utf-8")).intdigest() & 0x7FFFFFFF


class DeterministicRNG:
    """Stateless domain-separated pseudo-random number generator.

    Each call is a pure function of (seed, domain, key, counter);
    no internal mutable state, therefore fully thread-safe.
    """

    __slots__ = ("_seed",)

    _MAX_UINT64 = (1 << 64) - 1

    def __init__(self, seed: int) -> None:
        self._seed = seed

    def _hash(self, domain: Domain, key: int, counter: int) -> int:
        payload = struct.pack("<qiqi", self._seed, domain.value, key, counter)
        return xxhash.xxh64(payload).intdigest()

    def next_float(self, domain: Domain, key: int, counter: int) -> float:
        """Return a deterministic float in [0.0, 1.0)."""
        return self._hash(domain, key, counter) / (self._MAX_UINT64 + 1)

    def next_int(self, domain: Domain, key: int, counter: int, low: int, high: int) -> int:
        """Return a deterministic integer in [low, high] inclusive."""
        f = self.next_float(domain, key, counter)
        return low + int(f * (high - low + 1))

    def d20(self, domain: Domain, key: int, counter: int) -> int:
        return self.next_int(domain, key, counter, 1, 20)
