from __future__ import annotations

import re
import subprocess

from ..model import DeliveryResult, SMSSettings
from .base import NotificationTransport

TERMUX_SMS_COMMAND = "termux-sms-send"


def normalize_number(number: str) -> str:
    """Keep digits (and a leading '+') so the command gets a dialable number."""
    number = (number or "").strip()
    digits = re.sub(r"\D", "", number)
    return f"+{digits}" if number.startswith("+") else digits


class TermuxTransport(NotificationTransport):
    """Sends through the phone's own SIM using the Termux:API ``termux-sms-send`` command."""

    provider = "termux"

    def __init__(self, settings: SMSSettings, *, command: str = TERMUX_SMS_COMMAND):
        super().__init__(settings)
        self._command = command

    def send(self, destination: str, body: str) -> DeliveryResult:
        number = normalize_number(destination)
        if len(number.lstrip("+")) < 7:
            return DeliveryResult(delivered=False, error=f"Invalid phone number format: {destination}")

        try:
            result = subprocess.run(
                [self._command, "-n", number, body],
                capture_output=True,
                text=True,
                timeout=self._settings.timeout_seconds,
            )
        except subprocess.TimeoutExpired:
            return DeliveryResult(delivered=False, error=f"SMS timed out after {self._settings.timeout_seconds}s")
        except OSError as e:
            return DeliveryResult(delivered=False, error=f"SMS failed: {e}")

        if result.returncode != 0:
            return DeliveryResult(delivered=False, error=f"SMS failed: {result.stderr.strip() or result.returncode}")
        return DeliveryResult(delivered=True)
