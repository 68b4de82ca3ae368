[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "turtle_remote"
version = "0.1.0"
description = "Websocket server and shared data model for remotely controlling in-game mining turtles"
requires-python = ">=3.10"
keywords = ["turtle", "websocket", "voxel", "mesh", "remote-control", "game", "sqlite"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: Games/Entertainment",
]
dependencies = [
    "websockets",
    "aiohttp",
    "aiosqlite",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
turtle-remote-server = "turtle_remote.server:main"
turtle-remote-mesh-demo = "turtle_remote.meshing:main"

[tool.hatch.build.targets.wheel]
packages = ["turtle_remote"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
