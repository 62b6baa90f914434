"""
Canonical notification schemas - the provider-agnostic records pushed onto the queues.

Field names follow the wire format downstream consumers read (camelCase).
notificationType is the discriminator: each notification carries exactly one
of bounce / delivery / complaint.
"""
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

BounceType = Literal["Permanent", "Transient"]
BounceSubType = Literal[
    "General",
    "NoEmail",
    "Suppressed",
    "MailboxFull",
    "MessageTooLarge",
    "ContentRejected",
]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class MailObject(_Frozen):
    """Fields shared by every notification type."""
    timestamp: str = Field(..., description="ISO-8601 UTC, millisecond precision")
    messageId: str


class Recipient(_Frozen):
    emailAddress: Optional[str] = None


class Bounce(_Frozen):
    bounceType: BounceType
    bounceSubType: BounceSubType
    bouncedRecipients: list[Recipient]
    timestamp: str
    feedbackId: Optional[str] = None


class Delivery(_Frozen):
    timestamp: str
    recipients: list[Optional[str]]
    smtpResponse: Optional[str] = None


class Complaint(_Frozen):
    complainedRecipients: list[Recipient]
    timestamp: str
    feedbackId: Optional[str] = None


class BounceNotification(_Frozen):
    notificationType: Literal["Bounce"] = "Bounce"
    mail: MailObject
    bounce: Bounce


class DeliveryNotification(_Frozen):
    notificationType: Literal["Delivery"] = "Delivery"
    mail: MailObject
    delivery: Delivery


class ComplaintNotification(_Frozen):
    notificationType: Literal["Complaint"] = "Complaint"
    mail: MailObject
    complaint: Complaint


CanonicalNotification = Annotated[
    Union[BounceNotification, DeliveryNotification, ComplaintNotification],
    Field(discriminator="notificationType"),
]

canonical_notification_adapter = TypeAdapter(CanonicalNotification)


def to_message(notification: CanonicalNotification) -> dict:
    """Serialize a notification into the JSON-ready dict published to a queue."""
    return notification.model_dump(mode="json", exclude_none=True)
