"""Server statistics."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Report:
    """Outcome of one request; ``key`` is ``None`` for an invalid request."""

    request_id: int
    key: Optional[str] = None


@dataclass
class Statistics:
    """Number of requests seen for each key."""

    hits: Counter = field(default_factory=Counter)

    def add_report(self, report: Report) -> None:
        """Count one more request for the report's key."""
        self.hits[report.key] += 1

    def hits_for(self, key: Optional[str]) -> int:
        """Return how many requests were seen for ``key``."""
        return self.hits[key]