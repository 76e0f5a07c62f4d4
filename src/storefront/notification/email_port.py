"""Outbound mail port used for order notifications."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class EmailReceipt:
    delivered: bool
    message_id: str | None = None
    error: str | None = None


class EmailPort(ABC):
    name = "email"

    @abstractmethod
    def send(self, to: str, subject: str, body: str) -> EmailReceipt:
        """Hand one message to the mail provider; never raises for provider refusals."""
