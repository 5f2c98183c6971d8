import socket
import threading
import time

import pytest

from recomesh.server import (
    BAD_REQUEST_MESSAGE,
    BadRequest,
    handle_client,
    parse_request,
    serve,
)


class _FakeRecommender:
    def __init__(self, items=None, error=None):
        self.items = items or []
        self.error = error
        self.calls = []

    def recommend(self, algo_name, user_id, top_n):
        self.calls.append((algo_name, user_id, top_n))
        if self.error is not None:
            raise self.error
        return self.items


def _read_all(sock):
    chunks = []
    while True:
        chunk = sock.recv(4096)
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks)


def test_parse_request_text():
    assert parse_request("6 knn 3") == (6, "knn", 3)


def test_parse_request_bytes_with_whitespace():
    assert parse_request(b"  0 graph 10\n") == (0, "graph", 10)


def test_parse_request_truncates_long_algorithm_name():
    message = "6 " + "a" * 31 + "5 3"
    assert parse_request(message) == (6, "a" * 31, 5)


@pytest.mark.parametrize(
    "message", ["6 knn", "knn 6 3", "6 knn3", "", "6 " + "a" * 40 + " 3"]
)
def test_parse_request_rejects(message):
    with pytest.raises(BadRequest):
        parse_request(message)


def test_handle_client_sends_recommendations():
    fake = _FakeRecommender(items=[4, 8, 15])
    server_side, client_side = socket.socketpair()
    with client_side:
        client_side.sendall(b"6 knn 3\n")
        handle_client(server_side, fake)
        reply = _read_all(client_side)
    assert reply == b"4,8,15\n"
    assert fake.calls == [("knn", 6, 3)]


def test_handle_client_bad_request():
    fake = _FakeRecommender(items=[1])
    server_side, client_side = socket.socketpair()
    with client_side:
        client_side.sendall(b"hello\n")
        handle_client(server_side, fake)
        reply = _read_all(client_side)
    assert reply == BAD_REQUEST_MESSAGE.encode()
    assert fake.calls == []


def test_handle_client_reports_errors():
    fake = _FakeRecommender(error=ValueError("unknown"))
    server_side, client_side = socket.socketpair()
    with client_side:
        client_side.sendall(b"1 svd 2\n")
        handle_client(server_side, fake)
        reply = _read_all(client_side)
    assert reply == b"ERROR\n\n"
    assert fake.calls == [("svd", 1, 2)]


def test_handle_client_empty_connection():
    fake = _FakeRecommender(items=[3])
    server_side, client_side = socket.socketpair()
    with client_side:
        client_side.shutdown(socket.SHUT_WR)
        handle_client(server_side, fake)
        reply = _read_all(client_side)
    assert reply == b""
    assert fake.calls == []


def _free_port():
    with socket.socket() as probe:
        probe.bind(("127.0.0.1", 0))
        return probe.getsockname()[1]


def _connect(port, timeout=5.0):
    deadline = time.monotonic() + timeout
    last_error = None
    while time.monotonic() <= deadline:
        try:
            return socket.create_connection(("127.0.0.1", port), timeout=2)
        except OSError as exc:
            last_error = exc
            time.sleep(0.05)
    pytest.fail(f"server did not start listening: {last_error}")


def _ask(port, message):
    with _connect(port) as conn:
        conn.sendall(message)
        return _read_all(conn)


def test_serve_answers_requests():
    port = _free_port()
    fake = _FakeRecommender(items=[7, 9])
    request = b"1 mf 2\n"
    assert parse_request(request) == (1, "mf", 2)

    server_thread = threading.Thread(
        target=lambda: serve("127.0.0.1", port, fake), daemon=True
    )
    server_thread.start()

    reply = _ask(port, request)

    assert reply == b"7,9\n"
    assert fake.calls == [("mf", 1, 2)]
    assert server_thread.is_alive()