"""In-memory message bus for development and testing.

Publishing never calls subscribers directly. Deliveries are queued and run
by ``deliver_pending()``, mirroring the asynchronous hand-off of a real
broker: the publisher's transaction has completed before any consumer runs.
"""

from collections import defaultdict, deque

import structlog

from ordering.messaging.port import IntegrationMessage, MessageBus, MessageHandler

logger = structlog.get_logger(__name__)


class InMemoryMessageBus(MessageBus):
    def __init__(self) -> None:
        self.subscribers: dict[str, list[MessageHandler]] = defaultdict(list)
        self.published: list[IntegrationMessage] = []
        self.failed: list[tuple[IntegrationMessage, Exception]] = []
        self._pending: deque[tuple[MessageHandler, IntegrationMessage]] = deque()

    def publish(self, topic: str, payload: dict) -> IntegrationMessage:
        message = IntegrationMessage.wrap(topic, payload)
        self.published.append(message)

        handlers = self.subscribers.get(topic, [])
        if not handlers:
            logger.debug("No subscribers for topic, message dropped", topic=topic, message_id=message.message_id)
        for handler in handlers:
            self._pending.append((handler, message))

        return message

    def subscribe(self, topic: str, handler: MessageHandler) -> None:
        if handler not in self.subscribers[topic]:
            self.subscribers[topic].append(handler)

    def messages_for(self, topic: str) -> list[IntegrationMessage]:
        return [m for m in self.published if m.topic == topic]

    def pending_count(self) -> int:
        return len(self._pending)

    def deliver_pending(self) -> int:
        """Run queued deliveries, including ones queued while delivering.

        A failing handler is logged and recorded in ``failed``; it does not
        stop delivery to the remaining handlers. Returns the number of
        successful deliveries.
        """
        delivered = 0
        while self._pending:
            handler, message = self._pending.popleft()
            try:
                handler(message)
            except Exception as exc:
                logger.error(
                    "Error in message handler",
                    topic=message.topic,
                    message_id=message.message_id,
                    correlation_id=message.correlation_id,
                    error=str(exc),
                )
                self.failed.append((message, exc))
                continue
            delivered += 1
        return delivered

    def clear(self) -> None:
        self.published.clear()
        self.failed.clear()
        self._pending.clear()
