[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "recomesh"
version = "0.1.0"
description = "User-based KNN, matrix factorization and personalized PageRank recommenders with ranking metrics and a small TCP service"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "recommender",
    "collaborative-filtering",
    "knn",
    "matrix-factorization",
    "pagerank",
    "ndcg",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Information Analysis",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
recomesh-server = "recomesh.server:main"
recomesh-client = "recomesh.client:main"

[tool.hatch.build.targets.wheel]
packages = ["recomesh"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
