[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "elasticbuf"
version = "0.1.0"
description = "Growable ring buffers, linked-list buffers and pooled byte storage for network I/O"
requires-python = ">=3.10"
dependencies = []
keywords = ["buffer", "ring-buffer", "linked-list", "pool", "networking", "io"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["elasticbuf"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
