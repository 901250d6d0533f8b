"""In-memory implementation of EventPublisher for testing."""


class FakeEventPublisher:
    def __init__(self, fail: bool = False):
        self.messages: list[str] = []
        self.fail = fail

    def publish(self, message: str) -> bool:
        if self.fail:
            return False
        self.messages.append(message)
        return True

    def ping(self) -> bool:
        return not self.fail
