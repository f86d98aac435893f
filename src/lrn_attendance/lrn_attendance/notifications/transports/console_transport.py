from __future__ import annotations

import itertools
import logging

from ..model import DeliveryResult, SMSSettings
from .base import NotificationTransport

logger = logging.getLogger(__name__)


class ConsoleTransport(NotificationTransport):
    """Development mode: log the SMS instead of sending it."""

    provider = "console"

    def __init__(self, settings: SMSSettings):
        super().__init__(settings)
        self._ids = itertools.count(1)

    def send(self, destination: str, body: str) -> DeliveryResult:
        logger.info("[SMS] from=%s to=%s: %s", self._settings.from_number, destination, body)
        return DeliveryResult(delivered=True, message_id=f"console_{next(self._ids)}")
