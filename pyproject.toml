[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "exertrack"
version = "5.5.1"
description = "Run, verify and track progress through a directory of small Rust exercises"
requires-python = ">=3.11"
keywords = ["exercises", "education", "rust", "learning", "progress", "watch"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education :: Computer Aided Instruction (CAI)",
]
dependencies = [
    "watchdog",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
exertrack = "exertrack.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["exertrack"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
