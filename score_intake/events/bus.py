"""In-process fan-out of ingestion progress to subscribers.

One bus per worker process. Publishing never blocks: every subscriber owns a
bounded queue and an event that does not fit is dropped for that subscriber
only.
"""

import queue
import threading
from collections import OrderedDict
from collections.abc import Iterator
from typing import Any

from score_intake.events.models import EventType, ProgressEvent
from score_intake.logging.logger import Log

_CLOSED = object()


class Subscription:
    """A single subscriber's view of the bus."""

    def __init__(self, bus: "ProgressEventBus", session_id: str | None, queue_size: int) -> None:
        self._bus = bus
        self.session_id = session_id
        self._queue: queue.Queue[ProgressEvent | object] = queue.Queue(maxsize=queue_size)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def accepts(self, event: ProgressEvent) -> bool:
        return self.session_id is None or event.session_id == self.session_id

    def offer(self, event: ProgressEvent) -> bool:
        if self._closed:
            return False
        try:
            self._queue.put_nowait(event)
        except queue.Full:
            return False
        return True

    def get(self, timeout: float | None = None) -> ProgressEvent | None:
        """Next event, or None when the timeout expires or the subscription is closed."""
        if self._closed and self._queue.empty():
            return None
        try:
            item = self._queue.get(timeout=timeout)
        except queue.Empty:
            return None
        if item is _CLOSED:
            return None
        return item  # type: ignore[return-value]

    def close(self) -> None:
        """Detach from the bus and wake a consumer blocked in get()."""
        if self._closed:
            return
        self._closed = True
        self._bus.unsubscribe(self)
        # The oldest undelivered events give way to the close marker.
        while True:
            try:
                self._queue.put_nowait(_CLOSED)
                return
            except queue.Full:
                try:
                    self._queue.get_nowait()
                except queue.Empty:
                    pass

    def __iter__(self) -> Iterator[ProgressEvent]:
        """Drain whatever is currently queued without waiting."""
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return
            if item is _CLOSED:
                return
            yield item  # type: ignore[misc]

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class ProgressEventBus:
    """Publish/subscribe hub for job progress, scoped to one process."""

    def __init__(self, queue_size: int = 100, terminal_history: int = 10_000) -> None:
        if queue_size < 1:
            raise ValueError("queue_size must be at least 1")
        if terminal_history < 1:
            raise ValueError("terminal_history must be at least 1")
        self._queue_size = queue_size
        self._terminal_history = terminal_history
        self._lock = threading.Lock()
        self._subscriptions: list[Subscription] = []
        self._terminated: OrderedDict[str, None] = OrderedDict()
        self._closed = False

    def subscribe(self, session_id: str | None = None) -> Subscription:
        """Register a subscriber, optionally filtered to one upload session."""
        subscription = Subscription(self, session_id, self._queue_size)
        with self._lock:
            if self._closed:
                raise RuntimeError("Event bus is closed")
            self._subscriptions.append(subscription)
        Log.debug("Progress subscriber added", session_id=session_id)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def publish_progress(
        self,
        job_id: str,
        session_id: str | None,
        step: str,
        percent: int,
        message: str,
    ) -> int:
        return self.publish(
            ProgressEvent(
                job_id=job_id,
                type=EventType.PROGRESS,
                session_id=session_id,
                data={
                    "step": step,
                    "percent": percent,
                    "message": message,
                    "sessionId": session_id,
                },
            )
        )

    def publish_completed(
        self,
        job_id: str,
        session_id: str | None,
        result: dict[str, Any],
    ) -> int:
        return self.publish(
            ProgressEvent(
                job_id=job_id,
                type=EventType.COMPLETED,
                session_id=session_id,
                data=dict(result),
            )
        )

    def publish_failed(self, job_id: str, session_id: str | None, reason: str) -> int:
        return self.publish(
            ProgressEvent(
                job_id=job_id,
                type=EventType.FAILED,
                session_id=session_id,
                data={"error": reason, "sessionId": session_id},
            )
        )

    def publish(self, event: ProgressEvent) -> int:
        """Deliver to every matching subscriber; return how many accepted it."""
        with self._lock:
            if self._closed or event.job_id in self._terminated:
                return 0
            if event.is_terminal:
                self._terminated[event.job_id] = None
                while len(self._terminated) > self._terminal_history:
                    self._terminated.popitem(last=False)
            targets = [s for s in self._subscriptions if s.accepts(event)]

        delivered = 0
        dropped = 0
        for subscription in targets:
            if subscription.offer(event):
                delivered += 1
            else:
                dropped += 1
        if dropped:
            Log.warning(
                "Progress event dropped for slow or closed subscribers",
                job_id=event.job_id,
                event_type=event.type.value,
                dropped=dropped,
            )
        return delivered

    def close(self) -> None:
        """Stop accepting events and detach every subscriber."""
        with self._lock:
            self._closed = True
            subscriptions = list(self._subscriptions)
            self._subscriptions.clear()
        for subscription in subscriptions:
            subscription.close()

    def __enter__(self) -> "ProgressEventBus":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
