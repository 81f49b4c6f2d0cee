"""Request handler with a cache."""

from __future__ import annotations

import re
import time
from typing import Callable, Optional

from .cache import Cache
from .statistics import Report

BUFFER_SIZE = 512

OK = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <title>Hello!</title>
  </head>
  <body>
    <p>Result for key "{key}" is "{result}"</p>
  </body>
</html>"""

NOT_FOUND = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <title>Hello!</title>
  </head>
  <body>
    <h1>Oops!</h1>
    <p>Sorry, I don't know what you're asking for.</p>
  </body>
</html>"""

_REQUEST = re.compile(r"GET /(?P<key>\w+) HTTP/1.1\r\n")


def expensive_computation(key: str) -> str:
    """Compute the result for ``key``; takes a few seconds."""
    print(f"[handler] doing computation for key: {key}")
    time.sleep(3)
    return f"{key}🐕"


def parse_key(request: bytes) -> Optional[str]:
    """Extract the key from a ``GET /<key> HTTP/1.1`` request line."""
    match = _REQUEST.search(request.decode("utf-8", errors="replace"))
    return match["key"] if match else None


class Handler:
    """Answers hello requests, caching the result for each key."""

    def __init__(self, compute: Callable[[str], str] = expensive_computation) -> None:
        self._compute = compute
        self._cache: Cache[str, str] = Cache()

    def handle_conn(self, request_id: int, stream) -> Report:
        """Serve one request on ``stream``, close it, and report on it."""
        with stream:
            key = parse_key(stream.recv(BUFFER_SIZE))
            if key is None:
                response = "HTTP/1.1 404 NOT FOUND\r\n\r\n" + NOT_FOUND
            else:
                result = self._cache.get_or_insert_with(key, self._compute)
                body = OK.replace("{key}", key).replace("{result}", result)
                response = "HTTP/1.1 200 OK\r\n\r\n" + body
            stream.sendall(response.encode("utf-8"))
        return Report(request_id, key)