"""Reading of whitespace-separated rating transaction files."""

from __future__ import annotations

from dataclasses import dataclass
from os import PathLike
from typing import Iterator, Union

PathType = Union[str, "PathLike[str]"]

_FIELDS_PER_RECORD = 5


@dataclass(frozen=True)
class Rating:
    """One rating transaction: user, item, category, rating value and timestamp."""

    user_id: int
    item_id: int
    category_id: int
    rating: float
    timestamp: int


def _parse_record(fields: list[str]) -> Rating:
    user, item, category, value, stamp = fields
    return Rating(int(user), int(item), int(category), float(value), int(stamp))


def _iter_records(text: str) -> Iterator[Rating]:
    tokens = text.split()
    for start in range(0, len(tokens), _FIELDS_PER_RECORD):
        chunk = tokens[start:start + _FIELDS_PER_RECORD]
        if len(chunk) < _FIELDS_PER_RECORD:
            return
        try:
            yield _parse_record(chunk)
        except ValueError:
            return


def read_ratings(path: PathType) -> list[Rating]:
    """Read ``user item category rating timestamp`` records from *path*.

    Reading stops at the first record that is incomplete or malformed.
    Raises ``FileNotFoundError`` (or another ``OSError``) if the file
    cannot be opened.
    """
    with open(path, "r", encoding="utf-8") as handle:
        return list(_iter_records(handle.read()))