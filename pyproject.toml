[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "containercompose"
version = "0.1.0"
description = "Run docker-compose style service files with the `container` command-line tool"
requires-python = ">=3.10"
keywords = ["containers", "compose", "docker-compose", "orchestration"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: MacOS",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
container-compose = "containercompose.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["containercompose"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
