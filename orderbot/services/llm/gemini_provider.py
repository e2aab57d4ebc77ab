from typing import List, Optional

import httpx

from orderbot.logging_config import get_logger
from orderbot.services.llm.base import LLMError, LLMProvider, LLMResponse

logger = get_logger("llm.gemini")


class GeminiProvider(LLMProvider):
    """Google Gemini provider over the generateContent REST endpoint."""

    BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

    def __init__(self, api_key: str, default_model: str = "gemini-2.0-flash", timeout_seconds: float = 20.0):
        self.api_key = api_key
        self.default_model = default_model
        self.timeout_seconds = timeout_seconds

    @staticmethod
    def _to_contents(messages: List[dict]) -> tuple[list[dict], Optional[dict]]:
        """Map chat-style messages to Gemini contents plus an optional system instruction."""
        contents = []
        system_parts = []
        for message in messages:
            role = message.get("role", "user")
            text = message.get("content") or ""
            if role == "system":
                system_parts.append({"text": text})
                continue
            contents.append(
                {
                    "role": "model" if role == "assistant" else "user",
                    "parts": [{"text": text}],
                }
            )
        system_instruction = {"parts": system_parts} if system_parts else None
        return contents, system_instruction

    def generate(
        self,
        messages: List[dict],
        model: Optional[str] = None,
        temperature: float = 0.0,
        max_tokens: int = 256,
        timeout_seconds: Optional[float] = None,
        json_output: bool = False,
    ) -> LLMResponse:
        """Generate response from Gemini."""

        model = model or self.default_model
        contents, system_instruction = self._to_contents(messages)

        payload = {
            "contents": contents,
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_tokens,
            },
        }
        if json_output:
            payload["generationConfig"]["responseMimeType"] = "application/json"
        if system_instruction:
            payload["systemInstruction"] = system_instruction

        timeout = timeout_seconds if timeout_seconds is not None else self.timeout_seconds
        logger.debug(f"Gemini request: model={model}, contents_count={len(contents)}")
        with httpx.Client(timeout=timeout) as client:
            response = client.post(
                self.BASE_URL.format(model=model),
                headers={
                    "x-goog-api-key": self.api_key,
                    "Content-Type": "application/json",
                },
                json=payload,
            )

        logger.debug(f"Gemini response status: {response.status_code}")

        if response.status_code != 200:
            logger.error(f"Gemini error: {response.text}")
            raise LLMError(f"Gemini API error: {response.status_code} - {response.text}")

        data = response.json()

        content = ""
        candidates = data.get("candidates") or []
        if candidates:
            parts = (candidates[0].get("content") or {}).get("parts") or []
            content = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
        logger.debug(f"Gemini content: {content[:100] if content else 'EMPTY'}")

        return LLMResponse(
            content=content,
            model=data.get("modelVersion", model),
            usage=data.get("usageMetadata"),
        )
