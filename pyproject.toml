[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "defmtview"
version = "0.1.0"
description = "Render compact log frames from embedded firmware: format strings, argument values, frame display and logging integration"
requires-python = ">=3.10"
dependencies = []
keywords = ["embedded", "logging", "format-string", "firmware", "log-frames"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Embedded Systems",
    "Topic :: System :: Logging",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["defmtview"]

[tool.pytest.ini_options]
addopts = "-ra"
