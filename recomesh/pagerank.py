"""Personalised PageRank over a bipartite user-item graph."""

from __future__ import annotations

import numpy as np

from .ratings import PathType, read_ratings

MAX_USERS = 1000
MAX_ITEMS = 1000
DAMPING_FACTOR = 0.85
MAX_ITER = 100
EPSILON = 1e-6


class PageRankGraph:
    """Undirected graph with user nodes first, then item nodes."""

    def __init__(self, max_users: int = MAX_USERS, max_items: int = MAX_ITEMS) -> None:
        self.max_users = max_users
        self.max_items = max_items
        self._reset()

    def _reset(self) -> None:
        n = self.n_nodes
        self.adjacency = np.zeros((n, n), dtype=bool)
        self.degree = np.zeros(n, dtype=int)
        self.scores = np.zeros(n)
        self.personalization = np.zeros(n)

    @property
    def n_nodes(self) -> int:
        return self.max_users + self.max_items

    def _check_user(self, user_id: int) -> None:
        if not 0 <= user_id < self.max_users:
            raise ValueError(f"user_id {user_id} out of range [0,{self.max_users})")

    def add_edge(self, user_id: int, item_id: int) -> bool:
        """Link a user to an item; return False if the link already existed."""
        self._check_user(user_id)
        if not 0 <= item_id < self.max_items:
            raise ValueError(f"item_id {item_id} out of range [0,{self.max_items})")
        item_node = self.max_users + item_id
        if self.adjacency[user_id, item_node]:
            return False
        self.adjacency[user_id, item_node] = True
        self.adjacency[item_node, user_id] = True
        self.degree[user_id] += 1
        self.degree[item_node] += 1
        return True

    def compute_scores(self, start_uid: int) -> np.ndarray:
        """Run PageRank restarting at *start_uid* and return the node scores."""
        self._check_user(start_uid)
        n = self.n_nodes
        personalization = np.zeros(n)
        personalization[start_uid] = 1.0
        links = self.adjacency.astype(float)
        inv_degree = np.divide(
            1.0, self.degree, out=np.zeros(n), where=self.degree > 0
        )
        scores = np.full(n, 1.0 / n)
        for _ in range(MAX_ITER):
            previous = scores
            scores = (
                DAMPING_FACTOR * (links.T @ (previous * inv_degree))
                + (1.0 - DAMPING_FACTOR) * personalization
            )
            if np.abs(scores - previous).sum() < EPSILON:
                break
        self.scores = scores
        self.personalization = personalization
        return scores.copy()

    def recommend(self, user_id: int, top_n: int) -> list[int]:
        """Return up to *top_n* items not linked to *user_id*, best first."""
        scores = self.compute_scores(user_id)
        item_scores = scores[self.max_users:]
        candidates = np.flatnonzero(~self.adjacency[user_id, self.max_users:])
        order = np.argsort(-item_scores[candidates], kind="stable")
        return [int(item) for item in candidates[order][: max(top_n, 0)]]

    def clear(self) -> None:
        """Remove every edge and forget computed scores."""
        self._reset()


def build_graph(
    train_file: PathType, max_users: int = MAX_USERS, max_items: int = MAX_ITEMS
) -> PageRankGraph:
    """Build a graph from the ratings in *train_file*, ignoring out-of-range ids."""
    graph = PageRankGraph(max_users, max_items)
    for record in read_ratings(train_file):
        if 0 <= record.user_id < max_users and 0 <= record.item_id < max_items:
            graph.add_edge(record.user_id, record.item_id)
    return graph