[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gamekit"
version = "0.1.0"
description = "Building blocks for game backends: binary framing, player models, configuration, logging, store receipt checks and alert pushes."
requires-python = ">=3.10"
keywords = [
    "game-server",
    "framing",
    "in-app-purchase",
    "app-store",
    "google-play",
    "skiplist",
    "dingtalk",
    "telegram",
]
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
    "Topic :: Software Development :: Libraries :: Application Frameworks",
    "Topic :: Games/Entertainment",
]
dependencies = [
    "pyyaml",
    "requests",
    "pyjwt",
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["gamekit"]

[tool.hatch.build.targets.sdist]
include = ["gamekit", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
