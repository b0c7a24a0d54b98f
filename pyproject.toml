[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "audiostream"
version = "0.1.0"
description = "Audio chunk ingestion service with a staged async processing pipeline and HTTP/WebSocket endpoints"
requires-python = ">=3.10"
keywords = ["audio", "streaming", "pipeline", "websocket", "aiohttp", "ingestion"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Environment :: Web Environment",
    "Framework :: AsyncIO",
    "Framework :: aiohttp",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Multimedia :: Sound/Audio",
]
dependencies = [
    "aiohttp>=3.8",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
    "pytest-asyncio>=0.21",
]

[project.scripts]
audiostream = "audiostream.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["audiostream"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
