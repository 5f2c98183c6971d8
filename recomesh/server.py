"""TCP server answering ``<user_id> <algo> <top_n>`` recommendation requests."""

from __future__ import annotations

import argparse
import logging
import re
import socket
import threading
from typing import Optional, Protocol, Sequence, Union

from .recommender import Recommender

logger = logging.getLogger(__name__)

PORT = 9000
BUFFER_SIZE = 1024
LISTEN_BACKLOG = 10
MAX_ALGO_LENGTH = 31
BAD_REQUEST_MESSAGE = (
    "Bad request format. Use <int:user_id> <char*:algo> <int:top_n>\n"
)
ERROR_RESPONSE = "ERROR\n"

_INT = re.compile(r"\s*([+-]?\d+)")
_WORD = re.compile(r"\s*(\S{1,%d})" % MAX_ALGO_LENGTH)


class BadRequest(ValueError):
    """A request that does not follow ``<user_id> <algo> <top_n>``."""


class _Recommends(Protocol):
    def recommend(self, algo_name: str, user_id: int, top_n: int) -> list[int]: ...


def parse_request(message: Union[str, bytes]) -> tuple[int, str, int]:
    """Split a request into user id, algorithm name and number of items."""
    text = (
        message.decode("utf-8", errors="replace")
        if isinstance(message, bytes)
        else message
    )
    user = _INT.match(text)
    if user is None:
        raise BadRequest(BAD_REQUEST_MESSAGE.strip())
    algo = _WORD.match(text, user.end())
    if algo is None:
        raise BadRequest(BAD_REQUEST_MESSAGE.strip())
    top_n = _INT.match(text, algo.end())
    if top_n is None:
        raise BadRequest(BAD_REQUEST_MESSAGE.strip())
    return int(user.group(1)), algo.group(1), int(top_n.group(1))


def handle_client(conn: socket.socket, recommender: _Recommends) -> None:
    """Answer one request on *conn*, then close it."""
    with conn:
        try:
            data = conn.recv(BUFFER_SIZE - 1)
        except OSError as exc:
            logger.error("recv: %s", exc)
            return
        if not data:
            logger.error("recv: connection closed before a request arrived")
            return
        try:
            user_id, algo, top_n = parse_request(data)
        except BadRequest:
            conn.sendall(BAD_REQUEST_MESSAGE.encode())
            return
        logger.info("received: user_id=%d, algo=%s, top_n=%d", user_id, algo, top_n)
        try:
            items = recommender.recommend(algo, user_id, top_n)
            result = ",".join(str(item) for item in items)
        except (ValueError, OSError) as exc:
            logger.error("recommendation failed: %s", exc)
            result = ERROR_RESPONSE
        conn.sendall(result.encode() + b"\n")


def serve(host: str, port: int, recommender: _Recommends) -> None:
    """Accept clients forever, handling each one in its own thread."""
    with socket.create_server((host, port), backlog=LISTEN_BACKLOG) as server:
        logger.info("server listening on port %d", port)
        while True:
            try:
                conn, (peer_host, peer_port, *_) = server.accept()
            except OSError as exc:
                logger.error("accept: %s", exc)
                continue
            logger.info("connection from %s:%d", peer_host, peer_port)
            threading.Thread(
                target=handle_client, args=(conn, recommender), daemon=True
            ).start()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Serve recommendations over TCP.")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=PORT)
    parser.add_argument("--base-dir", default=".", help="directory holding knn/, mf/ and graph/")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    try:
        serve(args.host, args.port, Recommender(args.base_dir))
    except OSError as exc:
        logger.error("cannot start server: %s", exc)
        return 1
    except KeyboardInterrupt:
        return 0
    return 0