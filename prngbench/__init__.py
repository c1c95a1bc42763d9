"""Random byte generators, randomness statistics and a benchmark comparing them."""

__version__ = "0.1.0"