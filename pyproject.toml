[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "shlang"
version = "2.1.2"
description = "Lexer, Pratt parser and runtime value model for the shlang scripting language"
requires-python = ">=3.10"
dependencies = []
keywords = ["parser", "lexer", "pratt", "scripting", "language", "ast"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Interpreters",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
shlang = "shlang.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["shlang"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
