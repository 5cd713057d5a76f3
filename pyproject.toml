[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "walrus_sitegen"
version = "0.1.0"
description = "HTTP service that generates React sites with an LLM and publishes them to Walrus Sites"
requires-python = ">=3.10"
keywords = ["walrus", "sui", "site-generator", "llm", "openai", "flask"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Web Environment",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Software Development :: Code Generators",
]
dependencies = [
    "httpx",
    "flask",
    "werkzeug",
    "pyyaml",
    "python-dotenv",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
walrus-sitegen = "walrus_sitegen.app:main"

[tool.hatch.build.targets.wheel]
packages = ["walrus_sitegen"]

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
ignore_missing_imports = true
