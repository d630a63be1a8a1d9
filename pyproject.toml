[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "drillbook"
version = "0.1.0"
description = "Small systems building blocks: a PNG decoder, trade records and indexes, pcapng order-book replay, a thread pool, parallel reduce, tic-tac-toe players and uint32 matrices."
requires-python = ">=3.10"
keywords = [
    "png",
    "decoder",
    "pcapng",
    "orderbook",
    "trades",
    "thread-pool",
    "reduce",
    "tic-tac-toe",
    "matrix",
    "shared-memory",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
    "Topic :: Office/Business :: Financial :: Investment",
]
dependencies = [
    "lz4",
    "sortedcontainers",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
drillbook-orderbook = "drillbook.orderbook:main"
drillbook-shm-matrix = "drillbook.shm_matrix:main"

[tool.hatch.build.targets.wheel]
packages = ["drillbook"]

[tool.hatch.build.targets.sdist]
include = [
    "drillbook",
    "tests",
    "pyproject.toml",
]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
