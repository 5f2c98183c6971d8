"""User-based k-nearest-neighbour recommender with Pearson similarity."""

from __future__ import annotations

import logging

import numpy as np

from .ratings import PathType, read_ratings

logger = logging.getLogger(__name__)

MAX_USERS = 1000
MAX_ITEMS = 1000
K_NEIGHBORS = 10
_SIMILARITY_FLOOR = 1e-6


class KnnRecommender:
    """Predicts ratings from the most similar users who rated an item."""

    def __init__(
        self,
        max_users: int = MAX_USERS,
        max_items: int = MAX_ITEMS,
        k_neighbors: int = K_NEIGHBORS,
    ) -> None:
        self.max_users = max_users
        self.max_items = max_items
        self.k_neighbors = k_neighbors
        self.ratings = np.zeros((max_users, max_items))
        self.counts = np.zeros(max_users, dtype=int)
        self.means = np.zeros(max_users)
        self.similarity = np.zeros((max_users, max_users))

    def _in_range(self, user_id: int, item_id: int) -> bool:
        return 0 <= user_id < self.max_users and 0 <= item_id < self.max_items

    def load_ratings(self, filename: PathType) -> None:
        """Load ratings from *filename*, replacing any previous profiles.

        A later rating of the same (user, item) pair overrides an earlier one;
        a rating of zero or less counts as "not rated".
        """
        self.ratings = np.zeros((self.max_users, self.max_items))
        for record in read_ratings(filename):
            if self._in_range(record.user_id, record.item_id):
                self.ratings[record.user_id, record.item_id] = record.rating
            else:
                logger.warning(
                    "ignoring rating with out-of-range user %d or item %d",
                    record.user_id,
                    record.item_id,
                )
        rated = self.ratings > 0.0
        self.counts = rated.sum(axis=1)
        sums = np.where(rated, self.ratings, 0.0).sum(axis=1)
        self.means = np.divide(
            sums, self.counts, out=np.zeros(self.max_users), where=self.counts > 0
        )

    def pearson_similarity(self, u1: int, u2: int) -> float:
        """Pearson correlation of two users over the items both have rated."""
        r1, r2 = self.ratings[u1], self.ratings[u2]
        common = (r1 > 0.0) & (r2 > 0.0)
        x = r1[common] - self.means[u1]
        y = r2[common] - self.means[u2]
        sum_x2 = float(np.dot(x, x))
        sum_y2 = float(np.dot(y, y))
        if sum_x2 == 0 or sum_y2 == 0:
            return 0.0
        return float(np.dot(x, y)) / float(np.sqrt(sum_x2 * sum_y2))

    def compute_pearson_matrix(self) -> None:
        """Compute the similarity of every pair of users; self-similarity is 1."""
        rated = (self.ratings > 0.0).astype(float)
        centred = np.where(rated > 0, self.ratings - self.means[:, None], 0.0)
        squared = centred * centred
        sum_xy = centred @ centred.T
        sum_x2 = squared @ rated.T
        sum_y2 = rated @ squared.T
        denom = np.sqrt(sum_x2 * sum_y2)
        valid = (sum_x2 != 0) & (sum_y2 != 0)
        matrix = np.divide(sum_xy, denom, out=np.zeros_like(sum_xy), where=valid)
        np.fill_diagonal(matrix, 1.0)
        self.similarity = matrix

    def predict(self, user_id: int, item_id: int) -> float:
        """Predict *user_id*'s rating of *item_id*; 0.0 for out-of-range ids."""
        if not self._in_range(user_id, item_id):
            return 0.0
        raters = np.flatnonzero(self.ratings[:, item_id] > 0.0)
        raters = raters[raters != user_id]
        sims = self.similarity[user_id, raters]
        order = np.argsort(-sims, kind="stable")
        raters, sims = raters[order], sims[order]
        keep = np.abs(sims) > _SIMILARITY_FLOOR
        raters = raters[keep][: self.k_neighbors]
        sims = sims[keep][: self.k_neighbors]
        deviations = self.ratings[raters, item_id] - self.means[raters]
        num = float(np.dot(sims, deviations))
        den = float(np.abs(sims).sum())
        if den == 0.0:
            return float(self.means[user_id])
        return float(self.means[user_id]) + num / den

    def predict_all(self, test_file: PathType) -> list[float]:
        """Predict every in-range (user, item) pair listed in *test_file*."""
        predictions = []
        for record in read_ratings(test_file):
            if self._in_range(record.user_id, record.item_id):
                predictions.append(self.predict(record.user_id, record.item_id))
            else:
                logger.warning(
                    "skipping prediction for out-of-range user %d or item %d",
                    record.user_id,
                    record.item_id,
                )
        return predictions

    def recommend(self, user_id: int, top_n: int) -> list[int]:
        """Return up to *top_n* unrated items for *user_id*, best first."""
        if not 0 <= user_id < self.max_users:
            raise ValueError(
                f"user_id {user_id} out of range [0,{self.max_users})"
            )
        candidates = [
            (int(item), self.predict(user_id, int(item)))
            for item in np.flatnonzero(self.ratings[user_id] <= 0.0)
        ]
        candidates.sort(key=lambda pair: pair[1], reverse=True)
        return [item for item, _ in candidates[: max(top_n, 0)]]