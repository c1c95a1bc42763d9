# prngbench

prngbench measures the speed and statistical quality of several random byte
generators. It runs each of them in turn and prints the results side by side
in a table.

## Generators

All generators subclass `prngbench.basic.Generator`. Each one has a `name`
and a `generate_bytes(num_bytes)` method. A negative `num_bytes` raises
`ValueError`.

- `prngbench.basic.CryptoCSPRNG`: the operating system's secure random
  source (`os.urandom`).
- `prngbench.basic.MathPRNG(seed=None)`: a non-cryptographic Mersenne Twister.
  When no seed is given, it is seeded from the current time in nanoseconds.
- `prngbench.seeded.WeatherCSPRNG`: an HMAC-SHA256 counter-mode generator. Its
  seed is a SHA-256 hash of a live weather report, the time the request
  started, and how long the request took.
- `prngbench.seeded.HybridCSPRNG`: weather data and request timing, passed
  through HMAC-SHA256 keyed with 32 fresh bytes of system entropy.
- `prngbench.seeded.MultiEntropyCSPRNG`: weather data, a cryptocurrency price
  and the latencies to four web endpoints, all fetched at the same time. These
  are hashed together with the current time.

### Reseeding

The three network-seeded generators share `ReseedingGenerator`. It seeds
itself when it is created. Before each request, it reseeds again if more than
ten minutes have passed since the last reseed, or if more than 500 MiB has
been produced since then. `reseed()` can also be called directly. Each reseed
mixes the fresh entropy into the old state with HMAC-SHA256, keyed by the old
state.

### Network failures

A failed network request never stops generation:

- `WeatherCSPRNG` uses an empty body in place of the weather report.
- `HybridCSPRNG` uses an `error:` or `readerror:` marker, followed by the
  elapsed time.
- `MultiEntropyCSPRNG` uses a marker such as `weather_error` or
  `market_read_error` for a failed source. It leaves out any endpoint that did
  not answer, and uses `network_error_all` if none of them answered.

### Network access

Each constructor takes a `fetch` callable and a `clock` callable.

- `fetch(url, timeout)` returns the response body as bytes, or raises
  `OSError`. It defaults to `prngbench.seeded.fetch_url`, which uses
  `urllib`.
- `clock()` defaults to `time.monotonic`.

Passing your own `fetch` lets these generators run without network access,
for example in tests.

## Metrics

The functions in `prngbench.stats` are:

- `chi_square(data)`: Pearson's chi-square statistic over the 256 byte
  values. A uniform source scores about 255.
- `shannon_entropy(data)`: Shannon entropy in bits per byte. The maximum is
  8.0.
- `nist_monobit_p_value(data)`: the p-value of the NIST frequency (monobit)
  test. A block passes when the p-value is at least 0.01.

Each of these functions returns `0.0` for empty input.

## Installation

```
pip install .
```

## Running the benchmark

```
prngbench
```

By default the command runs 1000 iterations of 131072 bytes (128 KiB) against
every generator. You can change both values:

```
prngbench --iterations 50 --data-size 4096
```

A progress bar is shown while each generator runs. At the end the command
prints the results table, a short legend of the metrics, and the total time
taken. The network-seeded generators fetch live data when they are created and
whenever they reseed.

## Using it from Python

```python
import sys

from prngbench.basic import MathPRNG
from prngbench.benchmark import format_results, run_benchmark
from prngbench.stats import chi_square, nist_monobit_p_value, shannon_entropy

gen = MathPRNG(seed=42)
data = gen.generate_bytes(4096)
print(chi_square(data), shannon_entropy(data), nist_monobit_p_value(data))

result = run_benchmark(gen, 10, 4096, sys.stdout)
print(format_results([result]))
```

`run_benchmark` returns a frozen `BenchmarkResult`. It holds:

- the total generation time;
- the number of operations per second;
- the average chi-square, entropy and p-value;
- the number of passes;
- a `pass_rate` percentage.

If `iterations` is not positive, `run_benchmark` raises `ValueError`.

## What it does not do

- Results are only printed. They are not saved to a file and cannot be
  exported in a machine-readable format.
- The only statistical test from the NIST suite is the monobit test.

## Running the tests

```
pip install .[test]
pytest
```