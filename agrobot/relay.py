import logging
import time
from typing import Optional

import requests
from twilio.base.exceptions import TwilioException
from twilio.rest import Client

from agrobot.config import Config
from agrobot.errors import TransportError
from agrobot.localization import WHATSAPP_WELCOME

logger = logging.getLogger("relay")


def whatsapp_address(number: str) -> str:
    number = (number or "").strip()
    return number if number.startswith("whatsapp:") else f"whatsapp:{number}"


class TwilioRelay:
    """Outbound WhatsApp messages through Twilio."""

    def __init__(self, client: Optional[Client] = None, from_number: Optional[str] = None):
        self._client = client
        self.from_number = from_number or Config.twilio_whatsapp_number

    @property
    def client(self) -> Client:
        if self._client is None:
            if not (Config.twilio_account_sid and Config.twilio_auth_token):
                raise TransportError("Twilio credentials are not configured")
            self._client = Client(Config.twilio_account_sid, Config.twilio_auth_token)
        return self._client

    def send_text(self, to_number: str, body: str) -> str:
        if not to_number:
            raise TransportError("Recipient phone number is required")

        start = time.perf_counter()
        try:
            message = self.client.messages.create(
                from_=whatsapp_address(self.from_number),
                to=whatsapp_address(to_number),
                body=body,
            )
        except (TwilioException, requests.RequestException) as exc:
            raise TransportError(f"Twilio send failed: {exc}") from exc
        finally:
            ms = (time.perf_counter() - start) * 1000.0
            logger.info("[timing] step=twilio.send ms=%.2f to=%s", ms, to_number)

        return message.sid

    def send_welcome(self, to_number: str) -> str:
        return self.send_text(to_number, WHATSAPP_WELCOME)
