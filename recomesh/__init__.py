"""KNN, matrix-factorization and PageRank recommenders, metrics and a TCP service."""

__version__ = "0.1.0"
__all__ = [
    "client",
    "evaluation",
    "knn",
    "mf",
    "pagerank",
    "ratings",
    "recommender",
    "server",
]