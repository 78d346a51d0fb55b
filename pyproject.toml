[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dspvm"
version = "0.1.0"
description = "A small bytecode virtual machine and toy assembler for vector DSP programs"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["dsp", "audio", "virtual machine", "bytecode", "assembler", "synthesis"]
classifiers = [
    "Development Status :: 2 - Pre-Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Sound Synthesis",
    "Topic :: Software Development :: Assemblers",
    "Topic :: Software Development :: Interpreters",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
dspvm = "dspvm.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["dspvm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
