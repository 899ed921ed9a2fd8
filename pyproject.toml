[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "seafortune"
version = "0.2.0"
description = "Authoritative UDP game server for a small multiplayer ocean adventure"
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "server", "udp", "multiplayer", "ocean"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Role-Playing",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
seafortune-server = "seafortune.server:main"

[tool.hatch.build.targets.wheel]
packages = ["seafortune"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
