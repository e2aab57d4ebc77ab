from unittest.mock import Mock, patch

import httpx
import pytest

from orderbot.services.result import DeliveryError
from orderbot.services.whatsapp_service import WhatsAppService


def _response(status_code=200, json_data=None, text=""):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = json_data if json_data is not None else {"messages": [{"id": "wamid.1"}]}
    response.text = text
    return response


@pytest.fixture
def service():
    return WhatsAppService(token="wa-token", phone_id="555", api_version="v17.0", timeout_seconds=7)


class TestWhatsAppService:
    def test_url_uses_version_and_phone_id(self, service):
        assert service.url == "https://graph.facebook.com/v17.0/555/messages"

    @patch("orderbot.services.whatsapp_service.httpx.Client")
    def test_send_message_payload(self, mock_client_cls, service):
        client = mock_client_cls.return_value.__enter__.return_value
        client.post.return_value = _response()

        result = service.send_message("919999999999", "Product not found.")

        assert result == {"messages": [{"id": "wamid.1"}]}
        mock_client_cls.assert_called_once_with(timeout=7)
        kwargs = client.post.call_args.kwargs
        assert kwargs["headers"] == {"Authorization": "Bearer wa-token"}
        assert kwargs["json"] == {
            "messaging_product": "whatsapp",
            "to": "919999999999",
            "type": "text",
            "text": {"body": "Product not found."},
        }

    @patch("orderbot.services.whatsapp_service.httpx.Client")
    def test_send_document_payload(self, mock_client_cls, service):
        client = mock_client_cls.return_value.__enter__.return_value
        client.post.return_value = _response()

        service.send_document(
            "919999999999",
            "https://orders.example.com/invoices/invoice-1.pdf",
            caption="Your Invoice",
            filename="invoice-1.pdf",
        )

        assert client.post.call_args.kwargs["json"] == {
            "messaging_product": "whatsapp",
            "to": "919999999999",
            "type": "document",
            "document": {
                "link": "https://orders.example.com/invoices/invoice-1.pdf",
                "caption": "Your Invoice",
                "filename": "invoice-1.pdf",
            },
        }

    @patch("orderbot.services.whatsapp_service.httpx.Client")
    def test_document_without_caption(self, mock_client_cls, service):
        client = mock_client_cls.return_value.__enter__.return_value
        client.post.return_value = _response()

        service.send_document("1", "https://x/doc.pdf")

        assert client.post.call_args.kwargs["json"]["document"] == {"link": "https://x/doc.pdf"}

    @patch("orderbot.services.whatsapp_service.httpx.Client")
    def test_error_status_raises_delivery_error(self, mock_client_cls, service):
        client = mock_client_cls.return_value.__enter__.return_value
        client.post.return_value = _response(status_code=401, text="invalid token")

        with pytest.raises(DeliveryError):
            service.send_message("1", "hi")

    @patch("orderbot.services.whatsapp_service.httpx.Client")
    def test_transport_error_raises_delivery_error(self, mock_client_cls, service):
        client = mock_client_cls.return_value.__enter__.return_value
        client.post.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(DeliveryError):
            service.send_message("1", "hi")

    @patch("orderbot.services.whatsapp_service.httpx.Client")
    def test_non_json_success_body(self, mock_client_cls, service):
        client = mock_client_cls.return_value.__enter__.return_value
        response = _response()
        response.json.side_effect = ValueError("no json")
        client.post.return_value = response

        assert service.send_message("1", "hi") == {}
