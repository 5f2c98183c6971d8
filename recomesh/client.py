"""Command-line client sending one request to the recommendation server."""

from __future__ import annotations

import argparse
import socket
import sys
from typing import Optional, Sequence, Union

PORT = 9000
BUFFER_SIZE = 1024
DEFAULT_HOST = "127.0.0.1"


def send_request(host: str, port: int, message: Union[str, bytes]) -> str:
    """Send *message* to the server and return its reply as text."""
    payload = message.encode() if isinstance(message, str) else message
    limit = BUFFER_SIZE - 1
    with socket.create_connection((host, port)) as sock:
        sock.sendall(payload)
        received = bytearray()
        while len(received) < limit:
            chunk = sock.recv(limit - len(received))
            if not chunk:
                break
            received.extend(chunk)
    return received.decode("utf-8", errors="replace")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Ask the server for recommendations.")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=PORT)
    args = parser.parse_args(argv)

    print("Enter your request (e.g. 6 knn 3): ", end="", flush=True)
    message = sys.stdin.readline()
    try:
        response = send_request(args.host, args.port, message)
    except OSError as exc:
        print(f"connect: {exc}", file=sys.stderr)
        return 1
    if response:
        print(f"Recommendations: {response}")
    return 0