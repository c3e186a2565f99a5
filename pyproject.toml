[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "miigfx"
version = "0.1.0"
description = "Pure-Python TGA decoding, TrueType font parsing and glyph outlines, on-screen keyboard state and JSON message catalogs"
requires-python = ">=3.10"
dependencies = []
keywords = ["tga", "truetype", "font", "glyph", "outline", "gettext", "keyboard"]
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
    "Topic :: Multimedia :: Graphics",
    "Topic :: Text Processing :: Fonts",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["miigfx"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
