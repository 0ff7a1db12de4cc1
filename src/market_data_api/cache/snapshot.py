"""Snapshot cache — the published view shared by the refresher and HTTP handlers."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Iterable, Mapping

from market_data_api.models import NormalizedMarket, OrderBookSnapshot


@dataclass(frozen=True)
class Snapshot:
    """One fully-built refresh result. Never mutated after construction."""

    markets: tuple[NormalizedMarket, ...] = ()
    order_books: Mapping[str, OrderBookSnapshot] = field(
        default_factory=lambda: MappingProxyType({})
    )
    published_at: datetime | None = None

    @classmethod
    def build(
        cls,
        markets: Iterable[NormalizedMarket],
        order_books: Mapping[str, OrderBookSnapshot],
        published_at: datetime | None = None,
    ) -> Snapshot:
        """Freeze working collections into a snapshot (copies them)."""
        return cls(
            markets=tuple(markets),
            order_books=MappingProxyType(dict(order_books)),
            published_at=published_at,
        )


class SnapshotCache:
    """Single-writer, many-reader holder of the current Snapshot.

    ``publish`` swaps one reference under a lock; readers load that
    reference without locking, so they always see one whole snapshot.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot = Snapshot()
        self._generation = 0

    def publish(self, snapshot: Snapshot) -> None:
        """Make *snapshot* the visible one."""
        with self._lock:
            self._snapshot = snapshot
            self._generation += 1

    def current(self) -> Snapshot:
        """The most recently published snapshot (empty before the first publish)."""
        return self._snapshot

    def markets(self) -> tuple[NormalizedMarket, ...]:
        return self._snapshot.markets

    def order_book(self, ticker_id: str) -> OrderBookSnapshot | None:
        """Order book for *ticker_id*, or ``None`` if not in the snapshot."""
        return self._snapshot.order_books.get(ticker_id)

    @property
    def generation(self) -> int:
        """Number of publishes so far."""
        return self._generation
