# conclab

Concurrency building blocks for threaded Python programs, and a small HTTP
server that puts several of them to work. Nothing outside the standard
library is needed.

## What is inside

- **`conclab.adt`** – the abstract `ConcurrentMap` (`lookup`, `insert`,
  `delete`) and `ConcurrentSet` (`contains`, `insert`, `remove`) interfaces,
  and `DuplicateKeyError`, which `ConcurrentMap.insert` is to raise for a key
  that is already present.
- **`conclab.hello_server`**
  - `cache.Cache` – a partitioned cache whose factory runs at most once per
    key; concurrent callers for the same key wait for that one computation.
    If the factory raises, the error propagates and a later call tries again.
  - `thread_pool.ThreadPool` – a fixed number of worker threads. `execute`
    queues a job, `join` waits until every job has finished, `shutdown` (also
    on leaving a `with` block) waits, stops and joins the workers and raises
    `RuntimeError` if any job raised.
  - `tcp.CancellableTcpListener` – `bind((host, port))`, `incoming()` yields
    accepted sockets until `cancel()` is called.
  - `handler.Handler` – answers `GET /KEY HTTP/1.1` requests using a cache;
    `parse_key` extracts the key, `expensive_computation` is the default
    (three-second) computation.
  - `statistics.Report` and `statistics.Statistics` – per-key request counts.
  - `server.serve` and `server.main` – the hello server itself.
- **`conclab.boc`** – behaviour-oriented concurrency. Wrap shared values in
  `CownPtr` objects and schedule work over several at once with `run_when` or
  `when`. A behaviour runs on its own thread once it holds every cown it asked
  for; behaviours sharing a cown run in the order they were scheduled. The
  callable receives one reference per cown, whose value is its `value`
  attribute.
- **`conclab.elim_stack`** – `treiber_stack.TreiberStack` and
  `elim_stack.ElimStack`, which backs off into a 16-slot elimination array
  when its inner stack (a `TreiberStack` by default) is contended. Both share
  the `stack.Stack` interface: `push`, `pop`, `try_push`, `try_pop`,
  `is_empty`. `pop` on an empty stack raises `IndexError`; `try_pop` raises
  `stack.ContentionError` when it loses a race.
- **`conclab.growable_array`** – `AtomicCell` (`load`, `store`,
  `compare_exchange` by identity) and `GrowableArray`, an unbounded array of
  cells kept as a tree of 1024-wide segments that grows in height on demand.
- **`conclab.hazard_pointer`** – `hazard.HazardBag`, `hazard.Shield` (with
  `protect`, `try_protect`, `validate`, raising `hazard.PointerChanged`),
  `retire.RetiredSet`, and in `default` a process-wide `HAZARDS` bag with
  `default_shield`, `retire` and `collect` working on a per-thread retired set.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Examples

A cache whose factory runs at most once per key:

```python
from conclab.hello_server.cache import Cache

cache = Cache()
assert cache.get_or_insert_with("fox", lambda key: key.upper()) == "FOX"
assert cache.get_or_insert_with("fox", lambda key: "never called") == "FOX"
```

A thread pool:

```python
from conclab.hello_server.thread_pool import ThreadPool

results = []
with ThreadPool(4) as pool:
    for n in range(10):
        pool.execute(lambda n=n: results.append(n * n))
    pool.join()

assert sorted(results) == [n * n for n in range(10)]
```

Stacks:

```python
from conclab.elim_stack.elim_stack import ElimStack

stack = ElimStack()
stack.push(1)
stack.push(2)
assert stack.pop() == 2
assert stack.pop() == 1
assert stack.is_empty()
```

Behaviours over cowns:

```python
import threading
from conclab.boc import CownPtr, when

counter = CownPtr(0)
seen = []
done = threading.Event()

def bump(ref):
    ref.value += 1

def read(ref):
    seen.append(ref.value)
    done.set()

when(counter, bump)
when(counter, read)
done.wait()
assert seen == [1]
```

Hazard pointers:

```python
from conclab.growable_array import AtomicCell
from conclab.hazard_pointer.hazard import HazardBag, Shield
from conclab.hazard_pointer.retire import RetiredSet

bag = HazardBag()
retired = RetiredSet(bag)
freed = []
cell = AtomicCell(object())

with Shield(bag) as shield:
    node = shield.protect(cell)
    cell.store(None)
    retired.retire(node, freed.append)
    retired.collect()
    assert freed == []          # still protected

retired.collect()
assert freed == [node]
```

## The hello server

The package installs one command:

```
conclab-hello-server [--address HOST:PORT]
```

It listens on `localhost:7878` unless `--address` says otherwise. A
`GET /KEY HTTP/1.1` request gets an HTML page with the result for `KEY`; the
first request for a key takes about three seconds, later ones come from the
cache. Any other request gets a 404 page. Ctrl-C cancels the listener; the
server then prints the statistics (requests per key, with `None` for invalid
requests) and exits once every accepted connection has been handled.

From Python, `conclab.hello_server.server.serve(address, listener_ready,
pool_size)` runs the same server and returns the `Statistics`;
`listener_ready` receives the bound listener so the caller can cancel it.

## What this package does not do

`ConcurrentMap` and `ConcurrentSet` are interfaces only: the package ships no
concurrent hash map, linked list or list-based set implementing them, and
`GrowableArray` is offered on its own rather than as the bucket table of such
a map. The hazard-pointer "pointers" are ordinary Python objects identified
by `id`; reclamation means calling the `free` callback you pass to `retire`.