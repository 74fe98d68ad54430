[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "digitnet"
version = "0.1.0"
description = "A small fully connected neural network for classifying handwritten MNIST digits, with an interactive console."
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["mnist", "neural-network", "digits", "classification", "machine-learning"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
digitnet = "digitnet.commands:main"

[tool.hatch.build.targets.wheel]
packages = ["digitnet"]

[tool.pytest.ini_options]
addopts = "-ra"
