from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Any, Mapping

from ..core.constants import DEFAULT_SMS_FROM_NUMBER, DEFAULT_SMS_PROVIDER
from ..core.exceptions import ValidationError
from .factory import TransportFactory
from .model import SMSSettings
from .transports.base import NotificationTransport

logger = logging.getLogger(__name__)


class NotificationSettings:
    """Current SMS settings and the transport built from them.

    Settings start from configuration and can be replaced at runtime from
    the settings endpoint; the transport is rebuilt on every replace.
    """

    def __init__(self, settings: SMSSettings, factory: TransportFactory | None = None):
        self._factory = factory or TransportFactory()
        self._lock = threading.Lock()
        self._settings = settings
        self._transport = self._factory.create(settings)

    @property
    def settings(self) -> SMSSettings:
        return self._settings

    @property
    def transport(self) -> NotificationTransport:
        return self._transport

    def use_transport(self, transport: NotificationTransport) -> None:
        with self._lock:
            self._transport = transport

    def replace(self, data: Mapping[str, Any]) -> SMSSettings:
        provider = str(data.get("provider") or DEFAULT_SMS_PROVIDER).strip().lower()
        if not self._factory.supports(provider):
            raise ValidationError(
                f"Unsupported SMS provider: {provider} (available: {', '.join(self._factory.providers())})"
            )

        new_settings = replace(
            self._settings,
            provider=provider,
            enabled=data.get("enabled") is not False,
            from_number=str(data.get("fromNumber") or DEFAULT_SMS_FROM_NUMBER),
            api_key=str(data.get("apiKey") or ""),
            api_secret=str(data.get("apiSecret") or ""),
        )
        transport = self._factory.create(new_settings)
        with self._lock:
            self._settings = new_settings
            self._transport = transport
        logger.info("SMS settings updated: provider=%s enabled=%s", provider, new_settings.enabled)
        return new_settings
