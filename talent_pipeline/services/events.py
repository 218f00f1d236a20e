"""
In-process domain events.

Services publish one event per committed operation. Presentation concerns
(notifications, toasts, structured log lines) subscribe here instead of
living inside the engine services.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
from uuid import UUID

from talent_pipeline.utils.time import utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DomainEvent:
    """Outcome of a committed engine operation."""

    name: str
    resource_type: str
    resource_id: Any
    actor_id: Optional[UUID] = None
    details: Dict[str, Any] = field(default_factory=dict)
    occurred_at: datetime = field(default_factory=utc_now)


Subscriber = Callable[[DomainEvent], None]


class EventPublisher:
    """Fan-out of domain events to plain callables."""

    def __init__(self) -> None:
        self._subscribers: List[Subscriber] = []

    def subscribe(self, subscriber: Subscriber) -> Subscriber:
        self._subscribers.append(subscriber)
        return subscriber

    def unsubscribe(self, subscriber: Subscriber) -> None:
        if subscriber in self._subscribers:
            self._subscribers.remove(subscriber)

    def publish(self, event: DomainEvent) -> None:
        """
        Deliver an event to every subscriber.

        The operation that produced the event is already committed, so a
        subscriber failure is logged and the remaining subscribers still run.
        """
        for subscriber in list(self._subscribers):
            try:
                subscriber(event)
            except Exception:
                logger.exception(
                    "Event subscriber %r failed for %s %s",
                    subscriber,
                    event.name,
                    event.resource_id,
                )


def log_event(event: DomainEvent) -> None:
    logger.info(
        "event=%s resource=%s:%s actor=%s details=%s",
        event.name,
        event.resource_type,
        event.resource_id,
        event.actor_id,
        event.details,
    )


default_publisher = EventPublisher()
default_publisher.subscribe(log_event)
