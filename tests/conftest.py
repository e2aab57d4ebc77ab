from typing import List, Optional
from unittest.mock import Mock

import pytest

from orderbot.config import Settings
from orderbot.services.catalog import Catalog
from orderbot.services.llm.base import LLMProvider, LLMResponse


class FakeLLM(LLMProvider):
    """LLM stub that returns a fixed reply (or raises) and records prompts."""

    def __init__(self, content: str = "", error: Optional[Exception] = None):
        self.content = content
        self.error = error
        self.calls: List[List[dict]] = []
        self.json_output: Optional[bool] = None

    def generate(self, messages, model=None, temperature=0.0, max_tokens=256, timeout_seconds=None, json_output=False):
        self.calls.append(messages)
        self.json_output = json_output
        if self.error is not None:
            raise self.error
        return LLMResponse(content=self.content, model="fake")


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        whatsapp_token="test-token",
        whatsapp_phone_id="1234567890",
        whatsapp_verify_token="verify-secret",
        llm_api_key="test-key",
        public_base_url="https://orders.example.com",
        invoice_dir=str(tmp_path / "invoices"),
    )


@pytest.fixture
def catalog():
    return Catalog({"sugar": 40, "oil": 120, "rice": 60})


@pytest.fixture
def notifier():
    """Mock WhatsApp notifier."""
    return Mock()
