"""Statistical measures of byte-stream randomness."""

from __future__ import annotations

import math
from collections import Counter


def chi_square(data: bytes) -> float:
    """Pearson's chi-square statistic of byte frequencies against a uniform distribution."""
    if not data:
        return 0.0
    counts = Counter(data)
    expected = len(data) / 256.0
    return sum((counts.get(value, 0) - expected) ** 2 / expected for value in range(256))


def shannon_entropy(data: bytes) -> float:
    """Shannon entropy of the byte distribution, in bits per byte."""
    if not data:
        return 0.0
    total = len(data)
    entropy = 0.0
    for count in Counter(data).values():
        p = count / total
        entropy -= p * math.log2(p)
    return entropy


def nist_monobit_p_value(data: bytes) -> float:
    """P-value of the NIST SP 800-22 frequency (monobit) test."""
    n = len(data) * 8
    if n == 0:
        return 0.0
    ones = sum(bin(byte).count("1") for byte in data)
    s = 2 * ones - n
    s_obs = abs(s) / math.sqrt(n)
    return math.erfc(s_obs / math.sqrt(2))