[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "goverage"
version = "0.1.0"
description = "Turn Go test coverage profiles into a browsable HTML report"
requires-python = ">=3.10"
keywords = ["go", "coverage", "coverprofile", "html", "report", "testing"]
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
    "Topic :: Software Development :: Testing",
    "Topic :: Software Development :: Quality Assurance",
]
dependencies = [
    "jinja2>=3.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
goverage = "goverage.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["goverage"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
