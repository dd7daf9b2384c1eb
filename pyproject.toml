[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cargomsrv"
version = "0.1.0"
description = "Building blocks for finding and verifying the Minimum Supported Rust Version (MSRV) of a Cargo crate"
requires-python = ">=3.10"
keywords = ["rust", "cargo", "msrv", "rustup", "toolchain", "compatibility"]
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
    "Topic :: Software Development :: Build Tools",
]
dependencies = [
    "tomlkit",
    "platformdirs",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["cargomsrv"]

[tool.hatch.build.targets.sdist]
include = ["cargomsrv", "tests"]

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
