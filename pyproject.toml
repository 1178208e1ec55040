[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "consolewin"
version = "0.2.0"
description = "An interactive console window model: prompt, command history, reverse search and tab completion"
requires-python = ">=3.10"
dependencies = []
keywords = ["console", "widget", "history", "reverse-search", "tab-completion", "repl"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: User Interfaces",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
consolewin-demo = "consolewin.demo:main"

[tool.hatch.build.targets.wheel]
packages = ["consolewin"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
