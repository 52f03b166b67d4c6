[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "simplelog"
version = "0.1.0"
description = "Small levelled logging library emitting JSON log lines, with a structured logger and a coloured console handler."
requires-python = ">=3.10"
dependencies = []
keywords = ["logging", "json", "log levels", "structured logging", "console"]
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
    "Topic :: System :: Logging",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["simplelog"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
