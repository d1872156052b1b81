[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "filefarm"
version = "0.1.0"
description = "A master/worker farm that computes weighted sums of binary .dat files and collects sorted results over a Unix socket"
requires-python = ">=3.10"
dependencies = []
keywords = ["thread pool", "master worker", "unix socket", "farm", "collector"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
filefarm = "filefarm.launcher:main"
filefarm-collector = "filefarm.collector:main"
filefarm-master = "filefarm.master_worker:main"

[tool.hatch.build.targets.wheel]
packages = ["filefarm"]

[tool.pytest.ini_options]
addopts = "-ra"
