"""Hello server: answers ``GET /KEY`` requests using a thread pool."""

from __future__ import annotations

import argparse
import queue
import signal
from dataclasses import dataclass
from functools import partial
from typing import Callable, Optional, Tuple

from .handler import Handler
from .statistics import Statistics
from .tcp import CancellableTcpListener
from .thread_pool import ThreadPool

DEFAULT_ADDRESS = ("localhost", 7878)
DEFAULT_POOL_SIZE = 7


@dataclass(frozen=True)
class _EndOfReports:
    total: int


def _work(handler: Handler, request_id: int, conn, reports: queue.SimpleQueue) -> None:
    report = None
    try:
        report = handler.handle_conn(request_id, conn)
    finally:
        reports.put(report)


def _listen(pool: ThreadPool, listener: CancellableTcpListener, reports: queue.SimpleQueue) -> None:
    handler = Handler()
    spawned = 0
    try:
        for request_id, conn in enumerate(listener.incoming()):
            pool.execute(partial(_work, handler, request_id, conn, reports))
            spawned += 1
    finally:
        reports.put(_EndOfReports(spawned))


def _report(reports: queue.SimpleQueue, stats_out: queue.Queue) -> None:
    stats = Statistics()
    expected: Optional[int] = None
    received = 0
    while expected is None or received < expected:
        item = reports.get()
        if isinstance(item, _EndOfReports):
            expected = item.total
            continue
        received += 1
        if item is not None:
            print(f"[report] {item}")
            stats.add_report(item)
    print("[sending stat]")
    stats_out.put(stats)
    print("[sent stat]")


def serve(
    address: Tuple[str, int] = DEFAULT_ADDRESS,
    listener_ready: Optional[Callable[[CancellableTcpListener], object]] = None,
    pool_size: int = DEFAULT_POOL_SIZE,
) -> Statistics:
    """Serve requests on ``address`` until the listener is cancelled.

    ``listener_ready`` receives the bound listener before serving starts, so
    the caller can arrange to cancel it. Returns the collected statistics.
    """
    reports: queue.SimpleQueue = queue.SimpleQueue()
    stats_out: queue.Queue = queue.Queue(maxsize=1)
    with ThreadPool(pool_size) as pool, CancellableTcpListener.bind(address) as listener:
        if listener_ready is not None:
            listener_ready(listener)
        pool.execute(partial(_listen, pool, listener, reports))
        pool.execute(partial(_report, reports, stats_out))
        return stats_out.get()


def _parse_address(text: str) -> Tuple[str, int]:
    host, sep, port = text.rpartition(":")
    if not sep or not host or not port.isdigit() or int(port) > 65535:
        raise argparse.ArgumentTypeError(f"expected HOST:PORT, got {text!r}")
    return host, int(port)


def main(argv=None) -> int:
    """Run the hello server until interrupted with Ctrl-C."""
    parser = argparse.ArgumentParser(
        prog="hello-server", description="Serve cached results for GET /KEY requests."
    )
    parser.add_argument(
        "--address",
        type=_parse_address,
        default=DEFAULT_ADDRESS,
        help="HOST:PORT to listen on (default: localhost:7878)",
    )
    args = parser.parse_args(argv)
    host, port = args.address
    print(f"Run `curl http://{host}:{port}/KEY` to query the server with KEY")

    previous = signal.getsignal(signal.SIGINT)

    def install(listener: CancellableTcpListener) -> None:
        signal.signal(signal.SIGINT, lambda signum, frame: listener.cancel())

    try:
        stats = serve(args.address, install)
    finally:
        signal.signal(signal.SIGINT, previous if previous is not None else signal.SIG_DFL)
    print(f"[stat] {stats}")
    return 0