"""Live query subscriptions.

A subscriber registers a query and receives the full result set right away
and again after every committed change that touches a matching record.
Deliveries are made one at a time, in commit order.
"""

import inspect
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable
from uuid import uuid4

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[list], Awaitable[None] | None]


@dataclass
class Subscription:
    """Handle returned by observe(); call cancel() to stop deliveries."""

    table: str
    matches: Callable[[Any], bool]
    load: Callable[[], Awaitable[list]]
    callback: SnapshotCallback
    registry: "ObserverRegistry"
    id: str = field(default_factory=lambda: str(uuid4())[:8])
    active: bool = True
    deliveries: int = 0

    def cancel(self) -> None:
        if self.active:
            self.active = False
            self.registry.remove(self)

    def wants(self, records: list) -> bool:
        return self.active and any(self.matches(r) for r in records)

    async def refresh(self) -> None:
        """Re-run the query and hand the snapshot to the callback."""
        snapshot = await self.load()
        if not self.active:
            return
        self.deliveries += 1
        result = self.callback(snapshot)
        if inspect.isawaitable(result):
            await result


@dataclass
class _Change:
    table: str
    records: list


class ObserverRegistry:
    """Tracks subscriptions and delivers change notifications."""

    def __init__(self):
        self._subscriptions: dict[str, list[Subscription]] = {}
        self._staged: list[_Change] = []
        self._pending: deque[_Change] = deque()
        self._draining = False

    def add(self, subscription: Subscription) -> None:
        self._subscriptions.setdefault(subscription.table, []).append(subscription)

    def remove(self, subscription: Subscription) -> None:
        subs = self._subscriptions.get(subscription.table, [])
        if subscription in subs:
            subs.remove(subscription)

    def count(self, table: str) -> int:
        return len(self._subscriptions.get(table, []))

    def stage(self, table: str, records: list) -> None:
        """Record a change made inside the open transaction."""
        self._staged.append(_Change(table, list(records)))

    def publish_staged(self) -> None:
        self._pending.extend(self._staged)
        self._staged.clear()

    def discard_staged(self) -> None:
        self._staged.clear()

    async def drain(self) -> None:
        """Deliver pending changes.

        Changes published while a delivery is running (for example by a
        callback that writes) are queued and delivered by the outer drain.
        """
        if self._draining:
            return
        self._draining = True
        try:
            while self._pending:
                change = self._pending.popleft()
                for sub in list(self._subscriptions.get(change.table, [])):
                    if not sub.wants(change.records):
                        continue
                    try:
                        await sub.refresh()
                    except Exception:
                        logger.exception(
                            "Subscriber %s on %s failed", sub.id, change.table
                        )
        finally:
            self._draining = False
