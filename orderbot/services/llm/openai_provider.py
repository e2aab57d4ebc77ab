from typing import List, Optional

import httpx

from orderbot.logging_config import get_logger
from orderbot.services.llm.base import LLMError, LLMProvider, LLMResponse

logger = get_logger("llm.openai")

JSON_OBJECT_FORMAT = {"type": "json_object"}


def _first_choice_text(data: dict) -> str:
    choices = data.get("choices") or []
    if not choices:
        return ""
    message = choices[0].get("message") or {}
    if message.get("refusal"):
        logger.info("OpenAI refused the request", extra={"context": {"refusal": message["refusal"][:200]}})
        return ""
    return message.get("content") or ""


class OpenAIProvider(LLMProvider):
    """OpenAI chat completions; json_output switches on JSON mode so replies are a single object."""

    BASE_URL = "https://api.openai.com/v1/chat/completions"

    def __init__(self, api_key: str, default_model: str = "gpt-4o-mini", timeout_seconds: float = 20.0):
        self.api_key = api_key
        self.default_model = default_model
        self.timeout_seconds = timeout_seconds

    def build_payload(
        self,
        messages: List[dict],
        model: str,
        temperature: float,
        max_tokens: int,
        json_output: bool,
    ) -> dict:
        payload = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_completion_tokens": max_tokens,
        }
        if json_output:
            payload["response_format"] = JSON_OBJECT_FORMAT
        return payload

    def generate(
        self,
        messages: List[dict],
        model: Optional[str] = None,
        temperature: float = 0.0,
        max_tokens: int = 256,
        timeout_seconds: Optional[float] = None,
        json_output: bool = False,
    ) -> LLMResponse:
        model = model or self.default_model
        payload = self.build_payload(messages, model, temperature, max_tokens, json_output)

        timeout = timeout_seconds if timeout_seconds is not None else self.timeout_seconds
        logger.debug(f"OpenAI request: model={model}, json_output={json_output}")
        with httpx.Client(timeout=timeout) as client:
            response = client.post(
                self.BASE_URL,
                headers={"Authorization": f"Bearer {self.api_key}"},
                json=payload,
            )

        if response.status_code != 200:
            logger.error(f"OpenAI error: {response.status_code} {response.text[:200]}")
            raise LLMError(f"OpenAI API error: {response.status_code}")

        data = response.json()
        return LLMResponse(
            content=_first_choice_text(data),
            model=data.get("model", model),
            usage=data.get("usage"),
        )
