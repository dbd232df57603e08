[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "clikit"
version = "0.1.0"
description = "Building blocks for command line applications: a command tree, flag lookup through ancestors and typed positional arguments."
requires-python = ">=3.10"
dependencies = []
keywords = ["cli", "command-line", "arguments", "flags", "subcommands"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.setuptools.packages.find]
include = ["clikit*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
