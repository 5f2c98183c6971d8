"""Ranking and rating-accuracy metrics for recommendation results."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from .ratings import PathType, read_ratings

MAX_USERS = 1000
TOP_N_EVAL = 10

_LEADING_INT = re.compile(r"\s*\+?(\d+)")
_ATOI = re.compile(r"\s*([+-]?\d+)")
_TOKEN_SEPARATORS = re.compile(r"[ \n\r]+")


@dataclass
class UserRecommendations:
    """Items recommended to one user, best first."""

    user_id: int
    recommended_items: list[int] = field(default_factory=list)


@dataclass
class UserRelevantItems:
    """Items known to be relevant to one user."""

    user_id: int
    relevant_items: list[int] = field(default_factory=list)


def _atoi(token: str) -> int:
    match = _ATOI.match(token)
    return int(match.group(1)) if match else 0


def load_predictions(filename: PathType) -> list[UserRecommendations]:
    """Read lines of ``user item item ...``; at most TOP_N_EVAL items per user.

    Lines that do not start with a user id are skipped.
    """
    predictions = []
    with open(filename, "r", encoding="utf-8") as handle:
        for line in handle:
            match = _LEADING_INT.match(line)
            if match is None:
                continue
            rest = line[match.end():]
            tokens = [tok for tok in _TOKEN_SEPARATORS.split(rest) if tok]
            items = [_atoi(tok) for tok in tokens[:TOP_N_EVAL]]
            predictions.append(UserRecommendations(int(match.group(1)), items))
    return predictions


def load_relevant_items(filename: PathType) -> list[UserRelevantItems]:
    """Group the items of a rating file by user, in increasing user order."""
    grouped: dict[int, list[int]] = {}
    for record in read_ratings(filename):
        if not 0 <= record.user_id < MAX_USERS:
            continue
        grouped.setdefault(record.user_id, []).append(record.item_id)
    return [UserRelevantItems(uid, grouped[uid]) for uid in sorted(grouped)]


def _truth_index(truths: Iterable[UserRelevantItems]) -> dict[int, list[int]]:
    index: dict[int, list[int]] = {}
    for truth in truths:
        index.setdefault(truth.user_id, truth.relevant_items)
    return index


def hit_ratio(
    predictions: Iterable[UserRecommendations], truths: Iterable[UserRelevantItems]
) -> float:
    """Share of evaluated users with at least one relevant recommendation."""
    index = _truth_index(truths)
    hits = total = 0
    for pred in predictions:
        relevant = index.get(pred.user_id)
        if relevant is None:
            continue
        total += 1
        relevant_set = set(relevant)
        if any(item in relevant_set for item in pred.recommended_items):
            hits += 1
    return hits / total if total else 0.0


def mean_average_precision(
    predictions: Iterable[UserRecommendations], truths: Iterable[UserRelevantItems]
) -> float:
    """Mean over users of the average precision of their recommendation list."""
    index = _truth_index(truths)
    sum_ap = 0.0
    count = 0
    for pred in predictions:
        relevant = index.get(pred.user_id)
        if not relevant:
            continue
        relevant_set = set(relevant)
        found = 0
        ap = 0.0
        for rank, item in enumerate(pred.recommended_items, start=1):
            if item in relevant_set:
                found += 1
                ap += found / rank
        if found:
            sum_ap += ap / found
        count += 1
    return sum_ap / count if count else 0.0


def ndcg(
    predictions: Iterable[UserRecommendations], truths: Iterable[UserRelevantItems]
) -> float:
    """Mean normalised discounted cumulative gain at TOP_N_EVAL."""
    index = _truth_index(truths)
    total = 0.0
    count = 0
    for pred in predictions:
        relevant = index.get(pred.user_id)
        if not relevant:
            continue
        relevant_set = set(relevant)
        idcg = sum(
            1.0 / math.log2(k + 2) for k in range(min(len(relevant), TOP_N_EVAL))
        )
        dcg = sum(
            1.0 / math.log2(j + 2)
            for j, item in enumerate(pred.recommended_items[:TOP_N_EVAL])
            if item in relevant_set
        )
        if idcg > 0.0:
            total += dcg / idcg
            count += 1
    return total / count if count else 0.0


def _check_lengths(predictions: Sequence[float], truths: Sequence[float]) -> None:
    if len(predictions) != len(truths):
        raise ValueError(
            f"{len(predictions)} predictions but {len(truths)} true ratings"
        )
    if not predictions:
        raise ValueError("no ratings to compare")


def rmse(predictions: Sequence[float], truths: Sequence[float]) -> float:
    """Root mean squared error between predicted and true ratings."""
    _check_lengths(predictions, truths)
    sse = sum((p - t) ** 2 for p, t in zip(predictions, truths))
    return math.sqrt(sse / len(predictions))


def mae(predictions: Sequence[float], truths: Sequence[float]) -> float:
    """Mean absolute error between predicted and true ratings."""
    _check_lengths(predictions, truths)
    return sum(abs(p - t) for p, t in zip(predictions, truths)) / len(predictions)