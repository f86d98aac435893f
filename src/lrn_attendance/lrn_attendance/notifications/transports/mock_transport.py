from __future__ import annotations

import itertools
from typing import Iterable, Optional

from ..model import DeliveryResult, SMSSettings
from .base import NotificationTransport


class MockTransport(NotificationTransport):
    """Deterministic transport: records every send, fails only for configured numbers."""

    provider = "mock"

    def __init__(
        self,
        settings: Optional[SMSSettings] = None,
        *,
        fail_numbers: Iterable[str] = (),
        fail_all: bool = False,
    ):
        super().__init__(settings or SMSSettings())
        self.fail_numbers = set(fail_numbers)
        self.fail_all = fail_all
        self.sent: list[tuple[str, str]] = []
        self._ids = itertools.count(1)

    def send(self, destination: str, body: str) -> DeliveryResult:
        if self.fail_all or destination in self.fail_numbers:
            return DeliveryResult(delivered=False, error="Mock SMS service failure")
        self.sent.append((destination, body))
        return DeliveryResult(delivered=True, message_id=f"mock_{next(self._ids)}")
