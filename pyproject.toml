[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gatewayprobe"
version = "0.1.0"
description = "Probe-target discovery and load-balancer status resolution for Gateway API backed ingresses"
requires-python = ">=3.10"
dependencies = []
keywords = ["gateway-api", "ingress", "probing", "load-balancer", "kubernetes"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gatewayprobe"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
