[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gcovfmt"
version = "0.1.0"
description = "Read and write gcov coverage notes and data files (.gcno/.gcda)"
requires-python = ">=3.10"
dependencies = []
keywords = ["gcov", "coverage", "gcda", "gcno", "profiling", "histogram"]
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
    "Topic :: Software Development :: Testing",
    "Topic :: File Formats",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gcovfmt"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
