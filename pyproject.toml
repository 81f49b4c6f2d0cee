[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "conclab"
version = "0.1.0"
description = "Concurrent data structures, hazard pointers and a small caching HTTP server built on threads"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "concurrency",
    "treiber-stack",
    "elimination-stack",
    "hazard-pointers",
    "behaviour-oriented-concurrency",
    "growable-array",
    "thread-pool",
    "cache",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
conclab-hello-server = "conclab.hello_server.server:main"

[tool.hatch.build.targets.wheel]
packages = ["conclab"]

[tool.hatch.build.targets.sdist]
include = ["conclab", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
testpaths = ["tests"]
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
