[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "txnbench"
version = "0.1.0"
description = "Building blocks of an in-memory OLTP test bed: configuration, schemas, rows, B+tree and hash indexes, timestamp management and statistics."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "database",
    "oltp",
    "concurrency-control",
    "b-tree",
    "hash-index",
    "benchmark",
    "transactions",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
    "Topic :: System :: Benchmark",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[tool.hatch.build.targets.wheel]
packages = ["txnbench"]

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
