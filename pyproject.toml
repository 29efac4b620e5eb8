[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cfddns"
version = "0.1.0"
description = "Building blocks for a dynamic DNS updater: pretty printing, health monitors, notifier plumbing and a DNS record setter."
requires-python = ">=3.10"
dependencies = [
    "requests",
]
keywords = ["ddns", "dns", "dynamic-dns", "healthchecks", "uptime-kuma", "monitoring"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: Name Service (DNS)",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["cfddns"]

[tool.pytest.ini_options]
addopts = "-ra"
