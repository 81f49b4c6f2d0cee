"""Concurrent stacks, behaviours over cowns, a growable array, hazard pointers and a caching HTTP server."""

__version__ = "0.1.0"