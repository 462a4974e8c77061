[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "asmlinkvm"
version = "0.1.0"
description = "Two-pass assembler, multi-program linker and four-register virtual machine for a small assembly language"
requires-python = ">=3.10"
dependencies = []
keywords = ["assembler", "linker", "virtual machine", "education", "assembly"]
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
    "Topic :: Software Development :: Assemblers",
    "Topic :: Software Development :: Interpreters",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
asmlinkvm = "asmlinkvm.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["asmlinkvm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
