[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "expectmock"
version = "0.1.0"
description = "Expectation building blocks for mocks: argument matchers, expected calls with counts, actions and ordering."
requires-python = ">=3.10"
dependencies = []
keywords = ["mock", "mocking", "testing", "expectations", "matchers"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Testing",
    "Topic :: Software Development :: Testing :: Mocking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["expectmock"]

[tool.hatch.build.targets.sdist]
include = ["expectmock", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
