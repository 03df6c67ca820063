[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tpccbench"
version = "0.1.0"
description = "An in-memory TPC-C style workload: schema, data population, table placement and the five transaction profiles"
requires-python = ">=3.10"
dependencies = []
keywords = ["tpcc", "benchmark", "oltp", "database", "transactions", "workload"]
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
    "Topic :: Database :: Database Engines/Servers",
    "Topic :: System :: Benchmark",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tpccbench"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
