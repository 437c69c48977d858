[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tpsockets"
version = "0.1.0"
description = "A small TCP client and server that exchange length-prefixed messages and packages of values"
requires-python = ">=3.10"
dependencies = []
keywords = ["sockets", "tcp", "client", "server", "serialization", "protocol"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
tpsockets-client = "tpsockets.client:main"
tpsockets-server = "tpsockets.server:main"

[tool.hatch.build.targets.wheel]
packages = ["tpsockets"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
