[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "soulcast"
version = "0.1.0"
description = "A small fantasy-console engine: palette-indexed 320x240 RGB565 framebuffer, a four-channel sound chip and a script-driven game loop."
requires-python = ">=3.10"
keywords = ["fantasy-console", "emulator", "retro", "palette", "rgb565", "chiptune", "game-engine"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment",
    "Topic :: Multimedia :: Graphics",
    "Topic :: Multimedia :: Sound/Audio :: Sound Synthesis",
]
dependencies = [
    "pygame",
    "pillow",
    "mido",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
soulcast-player = "soulcast.emulator:main"

[tool.hatch.build.targets.wheel]
packages = ["soulcast"]

[tool.hatch.build.targets.sdist]
include = ["soulcast", "tests", "README.md", "pyproject.toml"]

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
