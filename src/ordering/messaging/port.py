"""Message bus port (abstract interface) and the integration message envelope."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4


@dataclass(frozen=True)
class IntegrationMessage:
    """Envelope for a message exchanged between bounded contexts.

    The correlation id is the ``order_id`` of the payload when it has one,
    so every message about an order can be traced together.
    """

    topic: str
    payload: dict
    message_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    correlation_id: str = ""

    @classmethod
    def wrap(cls, topic: str, payload: dict) -> "IntegrationMessage":
        order_id = payload.get("order_id") if isinstance(payload, dict) else None
        correlation_id = order_id if isinstance(order_id, str) and order_id else str(uuid4())
        return cls(topic=topic, payload=payload, correlation_id=correlation_id)


MessageHandler = Callable[[IntegrationMessage], None]


class MessageBus(ABC):
    @abstractmethod
    def publish(self, topic: str, payload: dict) -> IntegrationMessage:
        """Publish ``payload`` on ``topic`` and return the envelope that was sent."""
        ...

    @abstractmethod
    def subscribe(self, topic: str, handler: MessageHandler) -> None:
        ...
