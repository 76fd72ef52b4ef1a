[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fehview"
version = "0.1.0"
description = "Building blocks for a lightweight image viewer: file lists, sorting, PNG text comments, colours, image helpers and EXIF summaries."
requires-python = ">=3.10"
dependencies = [
    "pillow",
]
keywords = ["image", "viewer", "exif", "png", "filelist", "slideshow"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: Viewers",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["fehview"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
