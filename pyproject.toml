[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dewpointfan"
version = "1.0.0"
description = "Dew point controlled ventilation driven by BLE thermo-hygrometer readings"
requires-python = ">=3.10"
keywords = [
    "dew point",
    "ventilation",
    "fan control",
    "humidity",
    "ble",
    "thermobeacon",
    "home automation",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Home Automation",
    "Topic :: Scientific/Engineering :: Atmospheric Science",
]
dependencies = [
    "psutil",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["dewpointfan"]

[tool.hatch.build.targets.sdist]
include = [
    "dewpointfan",
    "tests",
]

[tool.pytest.ini_options]
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
