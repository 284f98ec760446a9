[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "muxd"
version = "0.1.0"
description = "Terminal multiplexer daemon toolkit: JSON-RPC protocol types, pane classification, PID-file daemon management, a WebSocket client and a status server"
requires-python = ">=3.10"
keywords = ["terminal", "multiplexer", "daemon", "json-rpc", "websocket"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Terminals",
]
dependencies = [
    "websockets>=12.0",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
muxd = "muxd.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["muxd"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
