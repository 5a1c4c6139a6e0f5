[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cnnrt"
version = "0.1.0"
description = "Activation functions, C-style formatting, a heap allocator model, SD card checksums and FAT32 image reading"
requires-python = ">=3.10"
dependencies = []
keywords = ["cnn", "activation", "softmax", "printf", "heap", "allocator", "fat32", "sd-card", "crc"]
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
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
    "Topic :: System :: Filesystems",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
cnnrt-fat32 = "cnnrt.fat32:main"

[tool.hatch.build.targets.wheel]
packages = ["cnnrt"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
