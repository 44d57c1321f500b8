[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "barutil"
version = "0.1.0"
description = "Building blocks for status bars: command runners, worker threads, config loading, unit formatting, rfkill, sway IPC and a player state machine"
requires-python = ">=3.10"
dependencies = []
keywords = ["status-bar", "sway", "wayland", "ipc", "rfkill", "mpd", "config"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Desktop Environment :: Window Managers :: Applets",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["barutil"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
