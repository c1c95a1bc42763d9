"""HMAC-SHA256 generators whose state is reseeded from network-derived entropy."""

from __future__ import annotations

import hashlib
import hmac
import http.client
import os
import threading
import time
import urllib.error
import urllib.request
from abc import abstractmethod
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed

from prngbench.basic import Generator

RESEED_INTERVAL = 10 * 60.0
RESEED_BYTE_INTERVAL = 500 * 1024 * 1024

WEATHER_URL = "https://wttr.in/?format=j1"
MARKET_URL = "https://api.coingecko.com/api/v3/simple/price?ids=bitcoin&vs_currencies=usd"
JITTER_ENDPOINTS = (
    "https://www.google.com",
    "https://www.yandex.ru",
    "https://www.baidu.com",
    "https://www.mercadolibre.com.ar",
)

_SYSTEM_KEY_FALLBACK = b"fatal_system_entropy_read_error_"

Fetch = Callable[[str, float], bytes]


class _BodyReadError(OSError):
    """The request succeeded but its body could not be read."""


def fetch_url(url: str, timeout: float) -> bytes:
    """Fetch ``url`` and return the response body, whatever the status code.

    Raises OSError when the request fails or the body cannot be read.
    """
    try:
        response = urllib.request.urlopen(url, timeout=timeout)
    except urllib.error.HTTPError as exc:
        response = exc
    except http.client.HTTPException as exc:
        raise OSError(f"request to {url} failed: {exc}") from exc
    with response:
        try:
            return response.read()
        except (OSError, http.client.HTTPException) as exc:
            raise _BodyReadError(f"reading {url} failed: {exc}") from exc


class ReseedingGenerator(Generator):
    """Counter-mode HMAC-SHA256 generator reseeded by time and volume."""

    timeout = 1.0

    def __init__(
        self,
        fetch: Fetch | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._fetch = fetch or fetch_url
        self._clock = clock or time.monotonic
        self._lock = threading.RLock()
        self.state = b""
        self.counter = 0
        self.bytes_generated = 0
        self.last_reseed = self._clock()
        self.reseed()

    @abstractmethod
    def gather_entropy(self) -> bytes:
        """Collect fresh entropy to mix into the state."""

    def reseed(self) -> None:
        """Mix fresh entropy into the state, keyed by the old state."""
        with self._lock:
            fresh = self.gather_entropy()
            self.state = hmac.digest(self.state, fresh, "sha256")
            self.last_reseed = self._clock()
            self.bytes_generated = 0

    def generate_bytes(self, num_bytes: int) -> bytes:
        if num_bytes < 0:
            raise ValueError(f"num_bytes must not be negative, got {num_bytes}")
        with self._lock:
            if (
                self._clock() - self.last_reseed > RESEED_INTERVAL
                or self.bytes_generated > RESEED_BYTE_INTERVAL
            ):
                self.reseed()

            chunks = []
            remaining = num_bytes
            while remaining > 0:
                block = hmac.digest(self.state, self.counter.to_bytes(8, "big"), "sha256")
                chunks.append(block[:remaining])
                remaining -= len(block)
                self.counter = (self.counter + 1) % (1 << 64)
                self.state = hmac.digest(self.state, block, "sha256")

            self.bytes_generated += num_bytes
            return b"".join(chunks)

    def _read_source(self, url: str, label: str) -> bytes:
        try:
            return self._fetch(url, self.timeout)
        except _BodyReadError:
            return f"{label}_read_error".encode()
        except OSError:
            return f"{label}_error".encode()


class WeatherCSPRNG(ReseedingGenerator):
    """Seeded from a weather report together with request timing."""

    name = "Weather Based PRNG"
    timeout = 1.0

    def gather_entropy(self) -> bytes:
        started_ns = time.time_ns()
        t0 = time.perf_counter_ns()
        try:
            body = self._fetch(WEATHER_URL, self.timeout)
        except OSError:
            body = b""
        duration = time.perf_counter_ns() - t0
        return hashlib.sha256(body + f"|{started_ns}|{duration}".encode()).digest()


class HybridCSPRNG(ReseedingGenerator):
    """Weather data conditioned by HMAC under a fresh system-entropy key."""

    name = "Hybrid PRNG"
    timeout = 1.0

    def _weather_entropy(self) -> bytes:
        t0 = time.perf_counter_ns()
        try:
            body = self._fetch(WEATHER_URL, self.timeout)
        except _BodyReadError:
            return f"readerror:{time.perf_counter_ns() - t0}".encode()
        except OSError:
            return f"error:{time.perf_counter_ns() - t0}".encode()
        return body + str(time.perf_counter_ns() - t0).encode()

    def gather_entropy(self) -> bytes:
        try:
            key = os.urandom(32)
        except NotImplementedError:
            key = _SYSTEM_KEY_FALLBACK
        return hmac.digest(key, self._weather_entropy(), "sha256")


class MultiEntropyCSPRNG(ReseedingGenerator):
    """Seeded from weather, market prices and latency to several endpoints."""

    name = "3 Entropy Source PRNG"
    timeout = 2.0

    def _network_jitter(self) -> bytes:
        def timed(url: str) -> int:
            t0 = time.perf_counter_ns()
            self._fetch(url, self.timeout)
            return time.perf_counter_ns() - t0

        latencies = []
        with ThreadPoolExecutor(max_workers=len(JITTER_ENDPOINTS)) as pool:
            futures = [pool.submit(timed, url) for url in JITTER_ENDPOINTS]
            for future in as_completed(futures):
                try:
                    latencies.append(str(future.result()))
                except OSError:
                    continue
        if not latencies:
            return b"network_error_all"
        return ",".join(latencies).encode()

    def gather_entropy(self) -> bytes:
        with ThreadPoolExecutor(max_workers=3) as pool:
            weather = pool.submit(self._read_source, WEATHER_URL, "weather")
            market = pool.submit(self._read_source, MARKET_URL, "market")
            network = pool.submit(self._network_jitter)
            parts = [weather.result(), market.result(), network.result()]
        parts.append(str(time.time_ns()).encode())
        return hashlib.sha256(b"|".join(parts)).digest()