"""A threaded HTTP server with a per-key result cache, thread pool and cancellable listener."""