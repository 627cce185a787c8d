[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "depserver"
version = "0.1.0"
description = "Describe releases of build dependencies (Apache httpd, .NET) with checksums, release dates, CPEs and PURLs"
requires-python = ">=3.10"
dependencies = [
    "semver",
]
keywords = ["dependencies", "releases", "checksums", "cpe", "purl", "httpd", "dotnet"]
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
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["depserver"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
