[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "venicebench"
version = "0.1.0"
description = "Audio-workstation performance benchmarks, reports and a headless mixer model"
requires-python = ">=3.10"
dependencies = []
keywords = ["benchmark", "audio", "dsp", "mixer", "performance"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Benchmark",
    "Topic :: Multimedia :: Sound/Audio",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
venicebench = "venicebench.suite:main"

[tool.hatch.build.targets.wheel]
packages = ["venicebench"]

[tool.pytest.ini_options]
addopts = "-ra"
