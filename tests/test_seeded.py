import http.server
import socket
import threading

import pytest

from prngbench.seeded import (
    JITTER_ENDPOINTS,
    MARKET_URL,
    RESEED_BYTE_INTERVAL,
    RESEED_INTERVAL,
    WEATHER_URL,
    HybridCSPRNG,
    MultiEntropyCSPRNG,
    ReseedingGenerator,
    WeatherCSPRNG,
    fetch_url,
)


class _Clock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class _Fixed(ReseedingGenerator):
    name = "fixed"

    def __init__(self, *args, **kwargs):
        self.seeds = 0
        super().__init__(*args, **kwargs)

    def gather_entropy(self):
        self.seeds += 1
        return b"fixed-entropy"


class _Recorder:
    def __init__(self, body=b"body", fail=False):
        self.body = body
        self.fail = fail
        self.calls = []
        self._lock = threading.Lock()

    def __call__(self, url, timeout):
        with self._lock:
            self.calls.append((url, timeout))
        if self.fail:
            raise OSError("unreachable")
        return self.body


def _fixed(clock=None):
    return _Fixed(fetch=_Recorder(), clock=clock or _Clock())


@pytest.mark.parametrize("size", [0, 1, 31, 32, 33, 100])
def test_length(size):
    gen = _fixed()
    assert len(ReseedingGenerator.generate_bytes(gen, size)) == size


def test_same_entropy_same_stream():
    first = ReseedingGenerator.generate_bytes(_fixed(), 200)
    second = ReseedingGenerator.generate_bytes(_fixed(), 200)
    assert len(first) == 200
    assert first == second


def test_block_aligned_calls_continue_stream():
    gen = _fixed()
    joined = ReseedingGenerator.generate_bytes(gen, 32) + ReseedingGenerator.generate_bytes(gen, 32)
    assert joined == ReseedingGenerator.generate_bytes(_fixed(), 64)


def test_short_output_is_prefix():
    long_output = ReseedingGenerator.generate_bytes(_fixed(), 40)
    short_output = ReseedingGenerator.generate_bytes(_fixed(), 10)
    assert long_output[:10] == short_output


def test_successive_calls_differ():
    gen = _fixed()
    first = ReseedingGenerator.generate_bytes(gen, 32)
    second = ReseedingGenerator.generate_bytes(gen, 32)
    assert len(first) == 32
    assert first != second


def test_counter_and_bytes_tracked():
    gen = _fixed()
    ReseedingGenerator.generate_bytes(gen, 70)
    assert gen.counter == 3
    assert gen.bytes_generated == 70


def test_negative_size_rejected():
    gen = _fixed()
    with pytest.raises(ValueError):
        ReseedingGenerator.generate_bytes(gen, -5)


def test_reseed_after_interval():
    clock = _Clock()
    gen = _fixed(clock)
    ReseedingGenerator.generate_bytes(gen, 8)
    assert gen.seeds == 1
    clock.now = RESEED_INTERVAL
    ReseedingGenerator.generate_bytes(gen, 8)
    assert gen.seeds == 1
    clock.now = RESEED_INTERVAL + 1
    ReseedingGenerator.generate_bytes(gen, 8)
    assert gen.seeds == 2
    assert gen.last_reseed == RESEED_INTERVAL + 1


def test_reseed_after_byte_volume():
    gen = _fixed()
    gen.bytes_generated = RESEED_BYTE_INTERVAL + 1
    output = ReseedingGenerator.generate_bytes(gen, 16)
    assert len(output) == 16
    assert gen.seeds == 2
    assert gen.bytes_generated == 16


def test_reseed_changes_stream():
    plain, reseeded = _fixed(), _fixed()
    ReseedingGenerator.reseed(reseeded)
    assert reseeded.seeds == 2
    plain_output = ReseedingGenerator.generate_bytes(plain, 32)
    reseeded_output = ReseedingGenerator.generate_bytes(reseeded, 32)
    assert len(reseeded_output) == 32
    assert plain_output != reseeded_output


def test_base_is_abstract():
    with pytest.raises(TypeError):
        ReseedingGenerator()


def test_names():
    assert WeatherCSPRNG(fetch=_Recorder()).name == "Weather Based PRNG"
    assert HybridCSPRNG(fetch=_Recorder()).name == "Hybrid PRNG"
    assert MultiEntropyCSPRNG(fetch=_Recorder()).name == "3 Entropy Source PRNG"


def test_weather_fetches_weather_url():
    fetch = _Recorder()
    gen = WeatherCSPRNG(fetch=fetch)
    assert fetch.calls == [(WEATHER_URL, 1.0)]
    assert len(gen.gather_entropy()) == 32


def test_weather_survives_fetch_failure():
    gen = WeatherCSPRNG(fetch=_Recorder(fail=True))
    assert len(gen.generate_bytes(50)) == 50


def test_hybrid_fetches_weather_url():
    fetch = _Recorder()
    HybridCSPRNG(fetch=fetch)
    assert fetch.calls == [(WEATHER_URL, 1.0)]


def test_hybrid_entropy_keyed_randomly():
    gen = HybridCSPRNG(fetch=_Recorder())
    first, second = gen.gather_entropy(), gen.gather_entropy()
    assert len(first) == 32
    assert first != second


def test_hybrid_survives_fetch_failure():
    gen = HybridCSPRNG(fetch=_Recorder(fail=True))
    assert len(gen.generate_bytes(33)) == 33


def test_multi_fetches_every_source():
    fetch = _Recorder()
    MultiEntropyCSPRNG(fetch=fetch)
    urls = sorted(url for url, _ in fetch.calls)
    assert urls == sorted([WEATHER_URL, MARKET_URL, *JITTER_ENDPOINTS])
    assert {timeout for _, timeout in fetch.calls} == {2.0}


def test_multi_survives_total_failure():
    gen = MultiEntropyCSPRNG(fetch=_Recorder(fail=True))
    assert len(gen.gather_entropy()) == 32
    assert len(gen.generate_bytes(64)) == 64


class _Handler(http.server.BaseHTTPRequestHandler):
    def do_GET(self):
        status = 404 if self.path == "/missing" else 200
        body = b"not here" if status == 404 else b"hello entropy"
        self.send_response(status)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def server():
    httpd = http.server.HTTPServer(("127.0.0.1", 0), _Handler)
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{httpd.server_address[1]}"
    httpd.shutdown()
    httpd.server_close()


def test_fetch_url_returns_body(server):
    assert fetch_url(server + "/", 2.0) == b"hello entropy"


def test_fetch_url_returns_body_of_error_status(server):
    assert fetch_url(server + "/missing", 2.0) == b"not here"


def test_fetch_url_raises_on_refused_connection():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    with pytest.raises(OSError):
        fetch_url(f"http://127.0.0.1:{port}/", 1.0)