# meeting_mailer/schemas.py
from __future__ import annotations

import json
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

ContactRecord = Dict[str, str]


# ---------- intake ----------
class UploadedFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: Literal["transcript", "contacts"]
    content: Union[str, List[ContactRecord]]
    # where intake stored the temporary copy; never sent to clients
    stored_path: Optional[str] = Field(default=None, exclude=True)


class UploadOut(BaseModel):
    success: bool = True
    files: List[UploadedFile] = Field(default_factory=list)


# ---------- summary ----------
class ActionItem(BaseModel):
    """
    One extracted task. Every field is optional on purpose: fallbacks
    ("Not specified", empty owner) are applied when rendering, not here.
    Numbers the model emits (`"timeline": 2`) are kept as their string form.
    """
    model_config = ConfigDict(frozen=True, extra="allow", coerce_numbers_to_str=True)

    item: Optional[str] = None
    owner: Optional[str] = None
    timeline: Optional[str] = None


class SummaryResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    summary: str = Field(min_length=1)
    action_items: List[ActionItem] = Field(default_factory=list, alias="actionItems")


class SummaryIn(BaseModel):
    transcript: str


class SummaryOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    summary: str
    action_items: List[ActionItem] = Field(default_factory=list, alias="actionItems")


# ---------- recipients ----------
class AddressRecord(BaseModel):
    """A contact row picked as recipient; only `email` matters for delivery."""
    model_config = ConfigDict(frozen=True, extra="allow")

    email: Optional[str] = None


# PlainAddress is a bare string
Recipient = Union[str, AddressRecord]


def recipient_display(recipient: Recipient) -> str:
    if isinstance(recipient, str):
        return recipient
    if recipient.email:
        return recipient.email
    return json.dumps(recipient.model_dump(exclude_none=True), ensure_ascii=False)


def recipient_address(recipient: Recipient) -> Optional[str]:
    if isinstance(recipient, str):
        return recipient.strip() or None
    return (recipient.email or "").strip() or None


# ---------- dispatch ----------
class SendEmailsIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    recipients: List[Recipient] = Field(default_factory=list)
    summary: str
    action_items: List[ActionItem] = Field(default_factory=list, alias="actionItems")


class DeliveryResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: Literal["direct", "redirect"]
    delivered_to: List[str] = Field(default_factory=list)
    intended_recipients: List[str] = Field(default_factory=list)
    message_ids: List[Optional[str]] = Field(default_factory=list)


class SendEmailsOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    mode: str
    delivered_to: List[str] = Field(default_factory=list, alias="deliveredTo")
    intended_recipients: List[str] = Field(default_factory=list, alias="intendedRecipients")


class ErrorOut(BaseModel):
    success: bool = False
    error: str


__all__ = [
    "ContactRecord", "UploadedFile", "UploadOut",
    "ActionItem", "SummaryResult", "SummaryIn", "SummaryOut",
    "AddressRecord", "Recipient", "recipient_display", "recipient_address",
    "SendEmailsIn", "DeliveryResult", "SendEmailsOut", "ErrorOut",
]
