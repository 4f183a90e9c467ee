[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "decafc"
version = "0.1.0"
description = "Front end of a compiler for the Decaf teaching language: lexer, parser and AST tools"
requires-python = ">=3.10"
dependencies = []
keywords = ["decaf", "compiler", "lexer", "parser", "ast", "education"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Environment :: Console",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Compilers",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
decafc = "decafc.cli:main"
decafc-lex = "decafc.cli:lex_main"

[tool.hatch.build.targets.wheel]
packages = ["decafc"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
