[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "basflow"
version = "0.1.0"
description = "Building blocks for asynchronous services: byte strings, handler pools, service groups and session work state machines"
requires-python = ">=3.10"
dependencies = []
keywords = ["server", "handler pool", "state machine", "echo", "framework"]
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
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["basflow"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
