[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bandfields"
version = "0.1.0"
description = "Dielectric tensors, subpixel averaging and field post-processing on periodic grids for photonic band-structure work"
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = ["photonic crystal", "band structure", "dielectric", "electromagnetism", "maxwell", "fields"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Physics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["bandfields"]

[tool.pytest.ini_options]
addopts = "-ra"
