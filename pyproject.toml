[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "netsweep"
version = "0.1.0"
description = "IPv4 scan building blocks: address sharding, source address parsing, option checks, JSON scan summaries and an address blacklist filter"
requires-python = ">=3.10"
keywords = ["scanning", "ipv4", "sharding", "blacklist", "network"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking :: Monitoring",
]
dependencies = []

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
netsweep-blacklist = "netsweep.zblacklist:main"

[tool.hatch.build.targets.wheel]
packages = ["netsweep"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"
