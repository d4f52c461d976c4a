[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "stateline"
version = "0.1.0"
description = "Building blocks for distributed job evaluation over ZeroMQ: message framing, routing, heartbeats, requesters and minions"
requires-python = ">=3.10"
keywords = ["mcmc", "distributed", "zeromq", "messaging", "heartbeat", "minion"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Distributed Computing",
]
dependencies = [
    "pyzmq",
    "numpy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["stateline"]

[tool.pytest.ini_options]
addopts = "-ra"
