import hmac
import json
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from orderbot.config import Settings
from orderbot.logging_config import get_logger
from orderbot.schemas.webhook import InboundMessage, WebhookResponse
from orderbot.services.order_service import OrderService

logger = get_logger("webhook")

router = APIRouter(prefix="/webhook")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_order_service(request: Request) -> OrderService:
    return request.app.state.order_service


def extract_message(payload: object) -> Optional[InboundMessage]:
    """Return entry[0].changes[0].value.messages[0], or None if the delivery has no message."""
    try:
        message = payload["entry"][0]["changes"][0]["value"]["messages"][0]
    except (KeyError, IndexError, TypeError):
        return None

    if not isinstance(message, dict):
        return None
    try:
        return InboundMessage.model_validate(message)
    except ValidationError as e:
        logger.warning(f"Malformed WhatsApp message object: {e}")
        return None


async def parse_webhook_body(request: Request) -> Optional[object]:
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw.decode("utf-8", errors="replace"))
    except ValueError:
        logger.warning("WhatsApp webhook body is not valid JSON")
        return None


@router.get("/whatsapp")
async def verify_whatsapp_webhook(request: Request, settings: Settings = Depends(get_settings)):
    """Answer the Meta subscription handshake."""
    mode = request.query_params.get("hub.mode")
    token = request.query_params.get("hub.verify_token")
    challenge = request.query_params.get("hub.challenge", "")

    if not mode or not token:
        return PlainTextResponse("Missing hub.mode or hub.verify_token", status_code=status.HTTP_400_BAD_REQUEST)

    token_ok = hmac.compare_digest(token.encode("utf-8"), settings.whatsapp_verify_token.encode("utf-8"))
    if mode == "subscribe" and token_ok:
        logger.info("Webhook verified")
        return PlainTextResponse(challenge, status_code=status.HTTP_200_OK)

    logger.warning("Webhook verification failed", extra={"context": {"mode": mode}})
    return PlainTextResponse("Forbidden", status_code=status.HTTP_403_FORBIDDEN)


@router.post("/whatsapp", response_model=WebhookResponse)
async def receive_whatsapp_webhook(request: Request, service: OrderService = Depends(get_order_service)):
    """
    Handle WhatsApp message deliveries:
    - no message in the payload -> acknowledge and ignore
    - message -> run the order pipeline and reply to the sender
    - any fault while processing -> 500
    """
    try:
        payload = await parse_webhook_body(request)
        message = extract_message(payload)
        if message is None:
            return WebhookResponse(success=True, message="ignored")

        result = await run_in_threadpool(service.process_message, message.from_, message.body)
        return WebhookResponse(success=True, message="processed", outcome=result.outcome.value)

    except Exception as e:
        logger.error(f"WhatsApp webhook error: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=WebhookResponse(success=False, message="Internal server error").model_dump(),
        )
