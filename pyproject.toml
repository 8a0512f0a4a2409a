[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "treebase"
version = "0.1.0"
description = "A small in-memory table store with a SQL-like query language, indexed by B-trees"
requires-python = ">=3.10"
dependencies = []
keywords = ["database", "b-tree", "avl", "query", "in-memory"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
treebase = "treebase.cli:main"

[tool.setuptools.packages.find]
include = ["treebase*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
