from decimal import Decimal
from typing import Literal, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

DEFAULT_CATALOG = {
    "sugar": Decimal("40"),
    "oil": Decimal("120"),
    "rice": Decimal("60"),
}


class Settings(BaseSettings):
    """Process-wide configuration, built once at startup and passed down explicitly."""

    whatsapp_token: str
    whatsapp_phone_id: str
    whatsapp_verify_token: str
    llm_api_key: str = Field(
        validation_alias=AliasChoices("llm_api_key", "gemini_api_key", "openai_api_key"),
    )

    llm_provider: Literal["gemini", "openai"] = "gemini"
    llm_model: Optional[str] = None
    llm_timeout_seconds: float = 20.0

    graph_api_version: str = "v17.0"
    whatsapp_timeout_seconds: float = 15.0

    port: int = 3000
    public_base_url: str = "http://localhost:3000"
    invoice_dir: str = "invoices"
    currency: str = "INR"
    catalog: dict[str, Decimal] = Field(default_factory=lambda: dict(DEFAULT_CATALOG))

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"
        populate_by_name = True
