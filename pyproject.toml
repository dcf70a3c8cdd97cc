[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "respotcore"
version = "0.1.0"
description = "Building blocks for a streaming music client: identifiers, credentials, on-disk cache, access point helpers, packet dispatch and metadata helpers"
requires-python = ">=3.10"
keywords = ["spotify", "streaming", "audio", "mercury", "protocol", "client"]
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
    "Topic :: Multimedia :: Sound/Audio :: Players",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["respotcore"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
