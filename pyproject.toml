[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "litereader"
version = "0.1.0"
description = "Read SQLite database files directly: inspect the schema, count rows and run simple SELECT queries from the command line or a curses terminal UI"
requires-python = ">=3.10"
dependencies = []
keywords = ["sqlite", "database", "btree", "file-format", "tui", "curses", "query"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Environment :: Console :: Curses",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Operating System :: MacOS",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Front-Ends",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
litereader = "litereader.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["litereader"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
