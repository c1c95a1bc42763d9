[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "prngbench"
version = "0.1.0"
description = "Benchmark and compare random byte generators for speed and statistical quality"
requires-python = ">=3.10"
dependencies = []
keywords = ["random", "prng", "csprng", "hmac-drbg", "benchmark", "entropy", "chi-square", "nist"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Benchmark",
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
prngbench = "prngbench.benchmark:main"

[tool.hatch.build.targets.wheel]
packages = ["prngbench"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
