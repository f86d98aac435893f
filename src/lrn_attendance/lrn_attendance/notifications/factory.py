from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from ..core.exceptions import UnknownProvider
from .model import SMSSettings
from .transports.base import NotificationTransport
from .transports.console_transport import ConsoleTransport
from .transports.mock_transport import MockTransport
from .transports.termux_transport import TermuxTransport
from .transports.twilio_transport import TwilioTransport

TransportBuilder = Callable[[SMSSettings], NotificationTransport]


def _default_builders() -> dict[str, TransportBuilder]:
    return {
        MockTransport.provider: MockTransport,
        ConsoleTransport.provider: ConsoleTransport,
        TermuxTransport.provider: TermuxTransport,
        TwilioTransport.provider: TwilioTransport,
    }


@dataclass
class TransportFactory:
    """Factory Pattern: provider name -> transport; new providers are registered, not switched on."""

    builders: dict[str, TransportBuilder] = field(default_factory=_default_builders)

    def register(self, provider: str, builder: TransportBuilder) -> None:
        self.builders[provider.strip().lower()] = builder

    def providers(self) -> list[str]:
        return sorted(self.builders)

    def supports(self, provider: str) -> bool:
        return (provider or "").strip().lower() in self.builders

    def create(self, settings: SMSSettings) -> NotificationTransport:
        builder = self.builders.get((settings.provider or "").strip().lower())
        if builder is None:
            raise UnknownProvider(f"Unsupported SMS provider: {settings.provider}")
        return builder(settings)
