[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "stdkit"
version = "0.1.0"
description = "Small building blocks: atomic values, bit sets, compact integer arrays, a thread-safe set, an auto-refreshing LRU cache and struct-tag helpers."
requires-python = ">=3.10"
dependencies = []
keywords = ["atomic", "bitset", "bit array", "compact array", "cache", "lru", "auto-refresh", "struct tag"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["stdkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
