[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "oedoana"
version = "0.1.0"
description = "Event-level analysis building blocks for OEDO beam-line detectors: raw-word decoding, hit selection, Brho reconstruction and efficiency checks"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "nuclear physics",
    "detector",
    "analysis",
    "srppac",
    "brho",
    "get",
    "dali",
    "ion chamber",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Physics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["oedoana"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
