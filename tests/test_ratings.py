import pytest

from recomesh.ratings import Rating, read_ratings


def _write(tmp_path, text, name="ratings.txt"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_reads_all_records(tmp_path):
    path = _write(tmp_path, "1 2 3 4.5 100\n0 7 1 2 200\n")
    assert read_ratings(path) == [
        Rating(1, 2, 3, 4.5, 100),
        Rating(0, 7, 1, 2.0, 200),
    ]


def test_records_need_not_be_one_per_line(tmp_path):
    path = _write(tmp_path, "1 2 3\n4.5 100 5 6 7 1.0 300")
    records = read_ratings(path)
    assert [r.user_id for r in records] == [1, 5]
    assert records[1].timestamp == 300


def test_stops_at_malformed_record(tmp_path):
    path = _write(tmp_path, "1 2 3 4.5 100\nx 2 3 4.5 100\n3 3 3 3 3\n")
    assert read_ratings(path) == [Rating(1, 2, 3, 4.5, 100)]


def test_ignores_trailing_incomplete_record(tmp_path):
    path = _write(tmp_path, "1 2 3 4.5 100\n9 9 9\n")
    assert len(read_ratings(path)) == 1


def test_empty_file_gives_empty_list(tmp_path):
    assert read_ratings(_write(tmp_path, "")) == []


def test_negative_ids_are_kept(tmp_path):
    path = _write(tmp_path, "-1 2 0 3.0 10\n")
    assert read_ratings(path)[0].user_id == -1


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_ratings(tmp_path / "absent.txt")


def test_rating_is_immutable():
    record = Rating(1, 2, 3, 4.0, 5)
    with pytest.raises(AttributeError):
        record.rating = 1.0  # type: ignore[misc]
    assert record.rating == 4.0
    assert record == Rating(1, 2, 3, 4.0, 5)