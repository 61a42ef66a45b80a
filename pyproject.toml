[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "remycc"
version = "0.1.0"
description = "Rule-table (whisker) congestion control: memory state, whisker trees and a rate-and-window sender"
requires-python = ">=3.10"
dependencies = []
keywords = ["congestion control", "networking", "whiskers", "tcp"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["remycc"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
