import queue
import socket
import threading

import pytest

from conclab.hello_server.tcp import CancellableTcpListener


def _collect(listener, out):
    for conn in listener.incoming():
        with conn:
            out.put(conn.recv(64))
    out.put("done")


def test_binds_to_requested_host():
    with CancellableTcpListener.bind(("127.0.0.1", 0)) as listener:
        host, port = listener.local_address()[:2]
        assert host == "127.0.0.1"
        assert 0 < port < 65536


def test_accepts_connections_then_stops_on_cancel():
    with CancellableTcpListener.bind(("127.0.0.1", 0)) as listener:
        out = queue.Queue()
        thread = threading.Thread(target=_collect, args=(listener, out))
        thread.start()
        with socket.create_connection(listener.local_address()[:2]) as client:
            client.sendall(b"ping")
            assert out.get(timeout=5) == b"ping"
        listener.cancel()
        assert out.get(timeout=5) == "done"
        thread.join(5)
        assert not thread.is_alive()


def test_cancel_without_connections_yields_nothing():
    with CancellableTcpListener.bind(("127.0.0.1", 0)) as listener:
        listener.cancel()
        assert list(listener.incoming()) == []


def test_accept_on_closed_listener_raises():
    listener = CancellableTcpListener.bind(("127.0.0.1", 0))
    listener.close()
    with pytest.raises(OSError):
        next(listener.incoming())