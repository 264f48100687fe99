[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "glyphatlas"
version = "0.1.0"
description = "Glyph atlas layout for distance-field fonts: charset parsing, rectangle and grid packing, glyph box placement and command-line option parsing"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "font",
    "glyph",
    "atlas",
    "sdf",
    "msdf",
    "signed distance field",
    "rectangle packing",
    "texture atlas",
    "charset",
]
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
    "Topic :: Text Processing :: Fonts",
    "Topic :: Multimedia :: Graphics",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["glyphatlas"]

[tool.hatch.build.targets.sdist]
include = ["glyphatlas", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
