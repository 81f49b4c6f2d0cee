"""TCP listener whose accept loop can be cancelled."""

from __future__ import annotations

import socket
import threading
from typing import Iterator, Tuple

_WILDCARDS = {"0.0.0.0": "127.0.0.1", "::": "::1", "": "127.0.0.1"}


class CancellableTcpListener:
    """A listening socket that stops yielding connections once cancelled."""

    def __init__(self, sock: socket.socket) -> None:
        self._socket = sock
        self._cancelled = threading.Event()

    @classmethod
    def bind(cls, address: Tuple[str, int]) -> "CancellableTcpListener":
        """Create a listener bound to ``(host, port)``."""
        return cls(socket.create_server(address))

    def local_address(self) -> tuple:
        """Return the address the listener is bound to."""
        return self._socket.getsockname()

    def cancel(self) -> None:
        """Stop accepting connections, waking a blocked ``accept``."""
        self._cancelled.set()
        host, port = self.local_address()[:2]
        with socket.create_connection((_WILDCARDS.get(host, host), port)):
            pass

    def incoming(self) -> Iterator[socket.socket]:
        """Yield accepted connections until the listener is cancelled."""
        while True:
            try:
                conn, _ = self._socket.accept()
            except OSError:
                if self._cancelled.is_set():
                    return
                raise
            if self._cancelled.is_set():
                conn.close()
                return
            yield conn

    def close(self) -> None:
        """Close the listening socket."""
        self._socket.close()

    def __enter__(self) -> "CancellableTcpListener":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()