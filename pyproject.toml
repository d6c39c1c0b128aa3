[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "topomanifests"
version = "0.1.0"
description = "Scheduler configuration decoding and manifest helpers for topology-aware scheduling components"
requires-python = ">=3.10"
keywords = ["kubernetes", "manifests", "scheduler", "topology", "numa", "yaml"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
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

[tool.hatch.build.targets.wheel]
packages = ["topomanifests"]

[tool.pytest.ini_options]
addopts = "-ra"
