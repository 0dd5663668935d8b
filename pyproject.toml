[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xfstool"
version = "0.1.0"
description = "Format, load, list and export files on an XFS disk image, with the storage pieces of the XSM machine"
requires-python = ">=3.10"
dependencies = []
keywords = ["xfs", "xsm", "disk image", "filesystem", "operating systems", "education"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
xfs-interface = "xfstool.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["xfstool"]

[tool.pytest.ini_options]
addopts = "-ra"
