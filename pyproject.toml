[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "guidauth"
version = "0.1.0"
description = "A small HTTP authentication service issuing JWT access tokens and bcrypt-hashed refresh tokens per GUID"
requires-python = ">=3.10"
keywords = ["authentication", "jwt", "refresh-token", "flask", "http", "sqlite"]
classifiers = [
    "Development Status :: 3 - Alpha",
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
    "Topic :: Security",
]
dependencies = [
    "flask",
    "pyjwt",
    "bcrypt",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
guidauth = "guidauth.api:main"

[tool.hatch.build.targets.wheel]
packages = ["guidauth"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"
