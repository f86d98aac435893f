from __future__ import annotations

from twilio.base.exceptions import TwilioRestException
from twilio.http.http_client import TwilioHttpClient
from twilio.rest import Client

from ..model import DeliveryResult, SMSSettings
from .base import NotificationTransport


class TwilioTransport(NotificationTransport):
    """Sends through the Twilio Messages API using the configured API key and secret."""

    provider = "twilio"

    def __init__(self, settings: SMSSettings):
        super().__init__(settings)
        self._client = None

    def _get_client(self) -> Client:
        # Built on first send so an incomplete config can still be saved and fixed.
        if self._client is None:
            self._client = Client(
                self._settings.api_key,
                self._settings.api_secret,
                http_client=TwilioHttpClient(timeout=self._settings.timeout_seconds),
            )
        return self._client

    def send(self, destination: str, body: str) -> DeliveryResult:
        if not self._settings.api_key or not self._settings.api_secret:
            return DeliveryResult(delivered=False, error="Twilio API key and secret are required")

        try:
            message = self._get_client().messages.create(
                body=body,
                from_=self._settings.from_number,
                to=destination,
            )
        except TwilioRestException as e:
            return DeliveryResult(delivered=False, error=e.msg or f"Twilio error {e.status}")

        return DeliveryResult(delivered=True, message_id=message.sid)
