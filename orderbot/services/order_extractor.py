import json
import re
from typing import Any, Optional

from pydantic import ValidationError

from orderbot.logging_config import get_logger
from orderbot.schemas.order import CandidateOrder
from orderbot.services.llm import LLMProvider
from orderbot.services.result import OrderError, Result

logger = get_logger("order_extractor")

EXTRACT_PROMPT = """Extract order items from this message.
Return JSON only.

Message: "{message}"

Example output:
{{"product":"sugar","quantity":1,"unit":"kg"}}"""

CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)
JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def _parse_json_object(content: str) -> Optional[dict]:
    """Parse the model output as a single JSON object, tolerating code fences and chatter."""
    text = CODE_FENCE_RE.sub("", (content or "").strip()).strip()
    if not text:
        return None

    payload: Any = None
    try:
        payload = json.loads(text)
    except (ValueError, RecursionError):
        match = JSON_OBJECT_RE.search(text)
        if match:
            try:
                payload = json.loads(match.group(0))
            except (ValueError, RecursionError):
                payload = None

    if not isinstance(payload, dict):
        return None
    return payload


def _to_candidate(payload: dict) -> Optional[CandidateOrder]:
    product = payload.get("product")
    if not isinstance(product, str) or not product.strip():
        return None

    unit = payload.get("unit")
    if unit is None:
        unit = ""
    if not isinstance(unit, str):
        return None

    try:
        return CandidateOrder(product=product.strip(), quantity=payload.get("quantity"), unit=unit.strip())
    except ValidationError:
        return None


class OrderExtractor:
    """Turns free text into a CandidateOrder via an LLM, or reports extraction_failed."""

    def __init__(
        self,
        llm: LLMProvider,
        model: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self.llm = llm
        self.model = model
        self.timeout_seconds = timeout_seconds

    def extract(self, text: str) -> Result[CandidateOrder]:
        if not isinstance(text, str) or not text.strip():
            return Result.failure("Empty message", OrderError.EXTRACTION_FAILED)

        prompt = EXTRACT_PROMPT.format(message=text.strip())
        try:
            response = self.llm.generate(
                [{"role": "user", "content": prompt}],
                model=self.model,
                temperature=0.0,
                max_tokens=256,
                timeout_seconds=self.timeout_seconds,
                json_output=True,
            )
        except Exception as e:
            logger.warning(f"Order extraction LLM call failed: {e}")
            return Result.failure(f"LLM call failed: {e}", OrderError.EXTRACTION_FAILED)

        content = getattr(response, "content", None)
        if not isinstance(content, str):
            content = ""

        payload = _parse_json_object(content)
        if payload is None:
            logger.info("LLM response is not a JSON object", extra={"context": {"content": content[:200]}})
            return Result.failure("LLM response is not a JSON object", OrderError.EXTRACTION_FAILED)

        candidate = _to_candidate(payload)
        if candidate is None:
            logger.info("LLM response has no usable product", extra={"context": {"payload": payload}})
            return Result.failure("LLM response has no usable product", OrderError.EXTRACTION_FAILED)

        logger.info(
            "Order extracted",
            extra={
                "context": {
                    "product": candidate.product,
                    "quantity": candidate.quantity,
                    "unit": candidate.unit,
                }
            },
        )
        return Result.success(candidate)
