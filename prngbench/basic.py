"""Generators backed directly by the operating system and by Python's Mersenne Twister."""

from __future__ import annotations

import os
import random
import threading
import time
from abc import ABC, abstractmethod


class Generator(ABC):
    """A named source of random bytes."""

    name: str = "Generator"

    @abstractmethod
    def generate_bytes(self, num_bytes: int) -> bytes:
        """Return ``num_bytes`` random bytes."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


def _check_size(num_bytes: int) -> None:
    if num_bytes < 0:
        raise ValueError(f"num_bytes must not be negative, got {num_bytes}")


class CryptoCSPRNG(Generator):
    """The operating system's cryptographically secure generator."""

    name = "Crypto CSPRNG"

    def generate_bytes(self, num_bytes: int) -> bytes:
        _check_size(num_bytes)
        return os.urandom(num_bytes)


class MathPRNG(Generator):
    """A non-cryptographic generator seeded, by default, from the current time."""

    name = "Math PRNG"

    def __init__(self, seed: int | None = None) -> None:
        if seed is None:
            seed = time.time_ns()
        self._rng = random.Random(seed)
        self._lock = threading.Lock()

    def generate_bytes(self, num_bytes: int) -> bytes:
        _check_size(num_bytes)
        words = (num_bytes + 3) // 4
        with self._lock:
            # Each 32-bit draw supplies four bytes, least significant first.
            data = b"".join(
                self._rng.getrandbits(32).to_bytes(4, "little") for _ in range(words)
            )
        return data[:num_bytes]