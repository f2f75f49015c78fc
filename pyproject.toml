[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "duffle"
version = "0.1.0"
description = "Image-style reference parsing, bundle repository indexes with semantic-version lookup, OpenPGP user IDs and a file-backed key/blob store"
requires-python = ">=3.10"
dependencies = []
keywords = ["bundle", "reference", "registry", "digest", "index", "semver", "user-id"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["duffle"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
