from __future__ import annotations

from abc import ABC, abstractmethod

# Contracts for the notification channel (module-local abstract interfaces).


class Notifier(ABC):
    """Fire-and-forget message sink.

    `send` must never raise: delivery failures are logged and reported as
    False so the decision cycle is not affected.
    """

    @abstractmethod
    async def send(self, message: str) -> bool:
        raise NotImplementedError
