[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "geecache"
version = "0.1.0"
description = "A distributed in-memory cache with LRU eviction, consistent hashing and request coalescing over HTTP"
requires-python = ">=3.10"
dependencies = []
keywords = ["cache", "lru", "distributed", "consistent-hashing", "singleflight", "wsgi"]
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
    "Topic :: System :: Distributed Computing",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
geecache = "geecache.server:main"

[tool.hatch.build.targets.wheel]
packages = ["geecache"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
