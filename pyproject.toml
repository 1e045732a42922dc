[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cpufeat"
version = "0.1.0"
description = "Detect CPU features from /proc/cpuinfo, auxiliary vectors, sysctl values and Windows processor flags"
requires-python = ">=3.10"
dependencies = []
keywords = ["cpu", "cpuinfo", "hwcaps", "auxv", "arm", "aarch64", "mips", "ppc", "loongarch"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Operating System :: MacOS",
    "Operating System :: Microsoft :: Windows",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Hardware",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["cpufeat"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
