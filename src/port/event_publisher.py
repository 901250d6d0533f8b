"""Port definition for EventPublisher."""

from typing import Protocol


class EventPublisher(Protocol):
    def publish(self, message: str) -> bool: ...
