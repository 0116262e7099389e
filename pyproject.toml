[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "goldbull"
version = "0.1.0"
description = "Question answering and multimodal processing utilities: question classification, answer evaluation, QA dataset generation, token sampling and image preprocessing."
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "question-answering",
    "multimodal",
    "nlp",
    "evaluation",
    "sampling",
    "image-preprocessing",
]
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
    "Topic :: Text Processing :: Linguistic",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["goldbull"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
