class WarningCollector:
    """Accumulates advisory messages for one shift.

    Warnings never block output. A message already present is not repeated.
    """

    def __init__(self, initial=()):
        self._messages = []
        self.extend(initial)

    def add(self, message: str) -> None:
        if message and message not in self._messages:
            self._messages.append(message)

    def extend(self, messages) -> None:
        for message in messages:
            self.add(message)

    def as_tuple(self) -> tuple:
        return tuple(self._messages)

    def __len__(self):
        return len(self._messages)

    def __bool__(self):
        return bool(self._messages)
