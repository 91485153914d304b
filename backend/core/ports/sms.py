from abc import ABC, abstractmethod


class SmsSenderPort(ABC):
    @abstractmethod
    def send(self, body: str, *, to: str, from_: str) -> str:
        """Send one message and return the provider message id."""
