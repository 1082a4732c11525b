[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "coopthread"
version = "0.1.0"
description = "Cooperative user-level threads with a FIFO queue, semaphores and optional timer preemption"
requires-python = ">=3.10"
dependencies = []
keywords = ["threads", "scheduler", "semaphore", "queue", "cooperative", "preemption"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
coopthread-demo-uthread = "coopthread.demo_uthread:main"
coopthread-demo-sem = "coopthread.demo_sem:main"

[tool.hatch.build.targets.wheel]
packages = ["coopthread"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
