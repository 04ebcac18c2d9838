[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "modbuskit"
version = "0.1.0"
description = "Modbus helpers: packed coil storage, hex dumps, IPv4 values, a small TCP client and target parsing"
requires-python = ">=3.10"
dependencies = []
keywords = ["modbus", "coils", "tcp", "hexdump", "industrial"]
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
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["modbuskit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
