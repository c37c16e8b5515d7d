[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rocketwire"
version = "0.1.0"
description = "Wire format, request headers and topic route data for RocketMQ-style message brokers"
requires-python = ">=3.10"
dependencies = []
keywords = ["rocketmq", "messaging", "remoting", "broker", "nameserver", "protocol"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Distributed Computing",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["rocketwire"]

[tool.pytest.ini_options]
addopts = "-ra"
