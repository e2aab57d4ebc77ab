from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TextBody(BaseModel):
    body: Optional[str] = None


class InboundMessage(BaseModel):
    """Single message object from a WhatsApp Cloud API webhook delivery."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    from_: str = Field(alias="from")
    id: Optional[str] = None
    type: Optional[str] = None
    text: Optional[TextBody] = None

    @property
    def body(self) -> str:
        if self.text and self.text.body:
            return self.text.body
        return ""


class WebhookResponse(BaseModel):
    success: bool
    message: str
    outcome: Optional[str] = None
