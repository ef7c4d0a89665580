[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "modhost"
version = "0.1.1"
description = "Building blocks of an audio plugin host: text command protocol, parameter monitoring, a dynamics compressor and stereo output handling"
requires-python = ">=3.10"
dependencies = []
keywords = ["audio", "dsp", "compressor", "ring-buffer", "volume", "protocol"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["modhost"]

[tool.pytest.ini_options]
addopts = "-ra"
