[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kindcli"
version = "0.23.0"
description = "Building blocks for a local Kubernetes cluster tool: command execution, error aggregation, image reference handling, filesystem helpers and a version command"
requires-python = ">=3.10"
dependencies = []
keywords = ["kubernetes", "kind", "docker", "cluster", "cli", "subprocess"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Clustering",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
kindcli = "kindcli.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["kindcli"]

[tool.pytest.ini_options]
addopts = "-ra"
