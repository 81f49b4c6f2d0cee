import queue
import socket
import threading

import pytest

from conclab.hello_server.server import main, serve


def _request(address, payload):
    with socket.create_connection(address, timeout=5) as client:
        client.sendall(payload)
        chunks = []
        while chunk := client.recv(4096):
            chunks.append(chunk)
    return b"".join(chunks)


def _start_server():
    ready = queue.Queue()
    result = queue.Queue()
    thread = threading.Thread(
        target=lambda: result.put(serve(("127.0.0.1", 0), ready.put, 4))
    )
    thread.start()
    listener = ready.get(timeout=5)
    return listener, result, thread


def test_serve_counts_invalid_requests_until_cancelled():
    listener, result, thread = _start_server()
    address = listener.local_address()[:2]
    for payload in (b"GET / HTTP/1.1\r\n\r\n", b"hello"):
        response = _request(address, payload)
        assert response.startswith(b"HTTP/1.1 404 NOT FOUND\r\n\r\n")
    listener.cancel()
    stats = result.get(timeout=10)
    thread.join(5)
    assert stats.hits_for(None) == 2
    assert sum(stats.hits.values()) == 2


def test_serve_without_requests_returns_empty_statistics():
    listener, result, thread = _start_server()
    listener.cancel()
    stats = result.get(timeout=10)
    thread.join(5)
    assert sum(stats.hits.values()) == 0


@pytest.mark.parametrize("address", ["nonsense", "localhost:99999", ":80", "host:port"])
def test_main_rejects_bad_address(address):
    with pytest.raises(SystemExit) as info:
        main(["--address", address])
    assert info.value.code == 2