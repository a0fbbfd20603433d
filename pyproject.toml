[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bankapi"
version = "0.1.0"
description = "A small banking HTTP service: accounts, ledger entries and atomic money transfers over SQLite."
requires-python = ">=3.10"
keywords = ["bank", "accounts", "transfers", "ledger", "flask", "sqlite", "rest"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Web Environment",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Office/Business :: Financial :: Accounting",
]
dependencies = [
    "flask>=2.2",
    "python-dotenv>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
bankapi = "bankapi.main:main"

[tool.hatch.build.targets.wheel]
packages = ["bankapi"]

[tool.hatch.build.targets.sdist]
include = ["bankapi", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
