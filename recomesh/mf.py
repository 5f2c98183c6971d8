"""Matrix factorisation recommender trained by stochastic gradient descent."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .ratings import PathType, read_ratings

logger = logging.getLogger(__name__)

DEFAULT_FACTORS = 10
DEFAULT_EPOCHS = 20
DEFAULT_ALPHA = 0.01
DEFAULT_LAMBDA = 0.1
_INIT_SCALE = 0.1


@dataclass
class MfModel:
    """Dense matrix of predicted ratings, indexed by user and then by item."""

    matrix: np.ndarray

    @property
    def n_users(self) -> int:
        return int(self.matrix.shape[0])

    @property
    def n_items(self) -> int:
        return int(self.matrix.shape[1])

    def _in_range(self, user_id: int, item_id: int) -> bool:
        return 0 <= user_id < self.n_users and 0 <= item_id < self.n_items

    def predict(self, user_id: int, item_id: int) -> float:
        """Predicted rating of *item_id* by *user_id*."""
        if not self._in_range(user_id, item_id):
            raise ValueError(
                f"user {user_id} or item {item_id} outside "
                f"[0,{self.n_users}) x [0,{self.n_items})"
            )
        return float(self.matrix[user_id, item_id])

    def predict_all(self, test_file: PathType) -> list[float]:
        """Predict every in-range (user, item) pair listed in *test_file*."""
        return [
            float(self.matrix[record.user_id, record.item_id])
            for record in read_ratings(test_file)
            if self._in_range(record.user_id, record.item_id)
        ]

    def recommend(self, user_id: int, top_n: int) -> list[int]:
        """Return up to *top_n* items with the highest predicted rating."""
        if not 0 <= user_id < self.n_users:
            raise ValueError(f"user_id {user_id} out of range [0,{self.n_users}]")
        order = np.argsort(-self.matrix[user_id], kind="stable")
        return [int(item) for item in order[: max(top_n, 0)]]


def train(
    train_file: PathType,
    num_factors: int,
    num_epochs: int,
    alpha: float,
    lambda_: float,
    rng: Optional[np.random.Generator] = None,
) -> MfModel:
    """Factorise the ratings in *train_file* and return the rebuilt matrix.

    The matrix has one row per user id and one column per item id, from zero
    up to the largest id seen in the file.
    """
    if num_factors <= 0:
        raise ValueError(f"invalid number of factors: {num_factors}")
    records = read_ratings(train_file)
    n_users = max((r.user_id for r in records), default=0)
    n_items = max((r.item_id for r in records), default=0)
    n_users = max(n_users, 0) + 1
    n_items = max(n_items, 0) + 1
    logger.info("n_users = %d, n_items = %d", n_users, n_items)

    if rng is None:
        rng = np.random.default_rng()
    users = _INIT_SCALE * rng.random((n_users, num_factors))
    items = _INIT_SCALE * rng.random((n_items, num_factors))

    usable = [r for r in records if r.user_id >= 0 and r.item_id >= 0]
    for _ in range(num_epochs):
        for record in usable:
            pu = users[record.user_id].copy()
            qi = items[record.item_id].copy()
            err = record.rating - float(pu @ qi)
            users[record.user_id] += alpha * (err * qi - lambda_ * pu)
            items[record.item_id] += alpha * (err * pu - lambda_ * qi)

    return MfModel(users @ items.T)


def train_default(
    ratings_file: PathType, rng: Optional[np.random.Generator] = None
) -> MfModel:
    """Train with the default hyper-parameters."""
    return train(
        ratings_file,
        DEFAULT_FACTORS,
        DEFAULT_EPOCHS,
        DEFAULT_ALPHA,
        DEFAULT_LAMBDA,
        rng,
    )