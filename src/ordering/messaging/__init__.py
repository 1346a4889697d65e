"""Message bus and domain event publisher factory.

Provides get_*/set_*/reset_* functions to swap implementations. The
in-memory bus is the default for development and testing.
"""

from ordering.messaging.memory_bus import InMemoryMessageBus
from ordering.messaging.port import MessageBus
from ordering.messaging.publisher import DomainEventPublisher

_current_bus: MessageBus | None = None
_current_publisher: DomainEventPublisher | None = None


def get_message_bus() -> MessageBus:
    """Return the current message bus. Defaults to InMemoryMessageBus."""
    global _current_bus
    if _current_bus is None:
        _current_bus = InMemoryMessageBus()
    return _current_bus


def set_message_bus(bus: MessageBus) -> None:
    """Override the active message bus. The publisher is rebuilt on next use."""
    global _current_bus, _current_publisher
    _current_bus = bus
    _current_publisher = None


def get_publisher() -> DomainEventPublisher:
    """Return the publisher bound to the current message bus."""
    global _current_publisher
    if _current_publisher is None:
        _current_publisher = DomainEventPublisher(get_message_bus())
    return _current_publisher


def set_publisher(publisher: DomainEventPublisher) -> None:
    global _current_publisher
    _current_publisher = publisher


def reset_messaging() -> None:
    """Reset the bus and publisher to their defaults."""
    global _current_bus, _current_publisher
    _current_bus = None
    _current_publisher = None
