"""Dispatch of recommendation requests to the available algorithms."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Optional

from .knn import KnnRecommender
from .mf import MfModel, train_default
from .pagerank import PageRankGraph, build_graph
from .ratings import PathType

RATINGS_FILE = "ratings.txt"


class Recommender:
    """Lazily trains each algorithm on first use from ``<base_dir>/<algo>/ratings.txt``."""

    ALGORITHMS = ("knn", "mf", "graph")

    def __init__(self, base_dir: PathType = ".") -> None:
        self.base_dir = Path(base_dir)
        self._lock = threading.Lock()
        self._knn: Optional[KnnRecommender] = None
        self._mf: Optional[MfModel] = None
        self._graph: Optional[PageRankGraph] = None

    def _ratings_path(self, algo: str) -> Path:
        return self.base_dir / algo / RATINGS_FILE

    def _recommend_knn(self, user_id: int, top_n: int) -> list[int]:
        if self._knn is None:
            knn = KnnRecommender()
            knn.load_ratings(self._ratings_path("knn"))
            knn.compute_pearson_matrix()
            self._knn = knn
        return self._knn.recommend(user_id, top_n)

    def _recommend_mf(self, user_id: int, top_n: int) -> list[int]:
        if self._mf is None:
            self._mf = train_default(self._ratings_path("mf"))
        return self._mf.recommend(user_id, top_n)

    def _recommend_graph(self, user_id: int, top_n: int) -> list[int]:
        if self._graph is None:
            self._graph = build_graph(self._ratings_path("graph"))
        return self._graph.recommend(user_id, top_n)

    def recommend(self, algo_name: str, user_id: int, top_n: int) -> list[int]:
        """Return up to *top_n* item ids for *user_id* using *algo_name*.

        Raises ``ValueError`` for an unknown algorithm or an invalid user, and
        ``OSError`` when the algorithm's rating file cannot be read.
        """
        handlers = {
            "knn": self._recommend_knn,
            "mf": self._recommend_mf,
            "graph": self._recommend_graph,
        }
        if algo_name is None:
            raise ValueError("no algorithm given")
        handler = handlers.get(algo_name)
        if handler is None:
            raise ValueError(f"unknown algorithm: {algo_name!r}")
        with self._lock:
            return handler(user_id, top_n)