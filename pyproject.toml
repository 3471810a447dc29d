[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "valik"
version = "1.0.0"
description = "Minimiser thresholds, error models and alignment summaries for prefiltered local alignment search on DNA"
requires-python = ">=3.10"
dependencies = []
keywords = ["bioinformatics", "minimiser", "k-mer", "threshold", "alignment", "cigar", "prefilter"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["valik"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
