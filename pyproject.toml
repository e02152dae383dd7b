[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chromelaunch"
version = "0.1.0"
description = "Locate, download and launch Chrome/Chromium with a remote debugging WebSocket endpoint"
requires-python = ">=3.10"
keywords = ["chrome", "chromium", "headless", "devtools", "browser", "automation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Operating System :: MacOS",
    "Operating System :: Microsoft :: Windows",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Testing",
    "Topic :: Internet :: WWW/HTTP :: Browsers",
]
dependencies = [
    "platformdirs",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["chromelaunch"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
