[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "aecodec"
version = "1.1.3"
description = "Adaptive Entropy Coding (CCSDS 121.0-B-3 adaptive Rice coding) for integer sample data"
requires-python = ">=3.10"
dependencies = []
keywords = ["compression", "rice", "ccsds", "aec", "entropy coding", "lossless"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Archiving :: Compression",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[project.scripts]
aecodec = "aecodec.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["aecodec"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"
