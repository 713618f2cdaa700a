[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tamarin"
version = "0.1.0"
description = "A small HTTP request multiplexer with sequenced handlers, path variables and static prefixes, usable as a WSGI application."
requires-python = ">=3.10"
dependencies = []
keywords = ["http", "wsgi", "router", "mux", "middleware", "cors"]
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
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Middleware",
    "Topic :: Internet :: WWW/HTTP",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tamarin"]

[tool.pytest.ini_options]
addopts = "-ra"
