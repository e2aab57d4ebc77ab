from typing import Optional

import httpx

from orderbot.logging_config import get_logger
from orderbot.services.result import DeliveryError

logger = get_logger("whatsapp_service")


class WhatsAppService:
    """Service for sending messages through the WhatsApp Cloud API."""

    BASE_URL = "https://graph.facebook.com/{version}/{phone_id}/messages"

    def __init__(
        self,
        token: str,
        phone_id: str,
        api_version: str = "v17.0",
        timeout_seconds: float = 15.0,
    ):
        self.token = token
        self.phone_id = phone_id
        self.timeout_seconds = timeout_seconds
        self.url = self.BASE_URL.format(version=api_version, phone_id=phone_id)

    def _make_request(self, data: dict) -> dict:
        """Post a message payload. Raises DeliveryError on any failure."""
        try:
            with httpx.Client(timeout=self.timeout_seconds) as client:
                response = client.post(
                    self.url,
                    json=data,
                    headers={"Authorization": f"Bearer {self.token}"},
                )
        except httpx.HTTPError as e:
            logger.error(f"WhatsApp API request failed: {e}")
            raise DeliveryError(f"WhatsApp API request failed: {e}") from e

        if response.status_code // 100 != 2:
            logger.error(
                "WhatsApp API error",
                extra={"context": {"status_code": response.status_code, "body": response.text[:500]}},
            )
            raise DeliveryError(f"WhatsApp API returned {response.status_code}")

        try:
            return response.json()
        except ValueError:
            return {}

    def send_message(self, to: str, text: str) -> dict:
        """Send text message to a WhatsApp user."""
        data = {
            "messaging_product": "whatsapp",
            "to": to,
            "type": "text",
            "text": {"body": text},
        }
        return self._make_request(data)

    def send_document(
        self,
        to: str,
        link: str,
        caption: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> dict:
        """Send a document by public link to a WhatsApp user."""
        document = {"link": link}
        if caption:
            document["caption"] = caption
        if filename:
            document["filename"] = filename

        data = {
            "messaging_product": "whatsapp",
            "to": to,
            "type": "document",
            "document": document,
        }
        return self._make_request(data)
