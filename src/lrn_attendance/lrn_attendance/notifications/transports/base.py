from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import DeliveryResult, SMSSettings


class NotificationTransport(ABC):
    """Strategy Pattern: one implementation per SMS provider."""

    provider: str = ""

    def __init__(self, settings: SMSSettings):
        self._settings = settings

    @abstractmethod
    def send(self, destination: str, body: str) -> DeliveryResult:
        raise NotImplementedError
