"""
SendGrid event normalizer - reshapes raw Event Webhook entries into canonical notifications.

Only bounce, dropped, delivered and spamreport events are forwarded. Anything
else, and any entry missing timestamp / sg_message_id / event, is dropped
without raising so one bad entry never fails the batch.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

from pydantic import ValidationError

from event_proxy.schemas.notifications import (
    Bounce,
    BounceNotification,
    CanonicalNotification,
    Complaint,
    ComplaintNotification,
    Delivery,
    DeliveryNotification,
    MailObject,
    Recipient,
)

logger = logging.getLogger(__name__)

EVENT_BOUNCE = "bounce"
EVENT_DELIVERED = "delivered"
EVENT_DROPPED = "dropped"
EVENT_SPAM = "spamreport"

# SendGrid appends an internal suffix beginning with this marker to the
# message id it returned from the send call.
MESSAGE_ID_MARKER = ".filter"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def map_timestamp(timestamp: Any) -> Optional[str]:
    """
    Convert a Unix timestamp in seconds to an ISO-8601 UTC string with milliseconds.

    Returns None for values that aren't a usable number.
    """
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        return None
    try:
        moment = _EPOCH + timedelta(milliseconds=int(timestamp * 1000))
    except (OverflowError, ValueError):
        return None
    return f"{moment.year:04d}-" + moment.strftime("%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def extract_message_id(sg_message_id: str) -> str:
    """
    Strip SendGrid's internal suffix from sg_message_id.

    Example: 14c5d75ce93.dfd.64b469.filter0001.16648.5515E0B88.0 -> 14c5d75ce93.dfd.64b469
    """
    return sg_message_id.split(MESSAGE_ID_MARKER, 1)[0]


def map_status_to_bounce_sub_type(subject: str, detail: str) -> Optional[str]:
    """
    Map the subject/detail parts of an enhanced status code to a bounce sub-type.

    Not a complete mapping of the IANA registry (RFC 3463 / RFC 5248), just
    the codes downstream consumers act on.
    """
    if subject == "1":
        return "NoEmail"
    if subject == "2":
        if detail == "2":
            return "MailboxFull"
        if detail == "3":
            return "MessageTooLarge"
        return None
    if subject == "6":
        return "ContentRejected"
    return None


def classify_bounce(event: dict) -> tuple[str, str]:
    """Return (bounceType, bounceSubType) for a bounce or dropped event."""
    if event.get("event") == EVENT_DROPPED:
        return "Permanent", "Suppressed"

    bounce_type = None
    bounce_sub_type = None

    status = event.get("status")
    parts = status.split(".") if isinstance(status, str) and status else None
    if parts and len(parts) == 3:
        status_class, subject, detail = parts
        if status_class == "5":
            bounce_type = "Permanent"
        bounce_sub_type = map_status_to_bounce_sub_type(subject, detail)

    return bounce_type or "Transient", bounce_sub_type or "General"


def _bounce_notification(event: dict, mail: MailObject) -> BounceNotification:
    bounce_type, bounce_sub_type = classify_bounce(event)
    return BounceNotification(
        mail=mail,
        bounce=Bounce(
            bounceType=bounce_type,
            bounceSubType=bounce_sub_type,
            bouncedRecipients=[Recipient(emailAddress=event.get("email"))],
            timestamp=mail.timestamp,
            feedbackId=event.get("sg_event_id"),
        ),
    )


def _delivery_notification(event: dict, mail: MailObject) -> DeliveryNotification:
    return DeliveryNotification(
        mail=mail,
        delivery=Delivery(
            timestamp=mail.timestamp,
            recipients=[event.get("email")],
            smtpResponse=event.get("response"),
        ),
    )


def _complaint_notification(event: dict, mail: MailObject) -> ComplaintNotification:
    return ComplaintNotification(
        mail=mail,
        complaint=Complaint(
            complainedRecipients=[Recipient(emailAddress=event.get("email"))],
            timestamp=mail.timestamp,
            feedbackId=event.get("sg_event_id"),
        ),
    )


# Every forwarded event type, and the builder that produces its notification.
# Types missing from this table are not forwarded.
_BUILDERS: dict[str, Callable[[dict, MailObject], CanonicalNotification]] = {
    EVENT_BOUNCE: _bounce_notification,
    EVENT_DROPPED: _bounce_notification,
    EVENT_DELIVERED: _delivery_notification,
    EVENT_SPAM: _complaint_notification,
}


def normalize_event(event: Any) -> Optional[CanonicalNotification]:
    """
    Normalize one raw SendGrid event.

    Returns None when the event is malformed or of a type we don't forward.
    The input dict is never modified.
    """
    if not isinstance(event, dict):
        return None

    timestamp = event.get("timestamp")
    sg_message_id = event.get("sg_message_id")
    event_type = event.get("event")
    if not timestamp or not sg_message_id or not event_type:
        return None
    if not isinstance(sg_message_id, str) or not isinstance(event_type, str):
        return None

    builder = _BUILDERS.get(event_type)
    if builder is None:
        logger.debug("Ignoring unsupported event type: %s", event_type)
        return None

    iso_timestamp = map_timestamp(timestamp)
    if iso_timestamp is None:
        logger.debug("Ignoring event with invalid timestamp: %r", timestamp)
        return None

    try:
        mail = MailObject(timestamp=iso_timestamp, messageId=extract_message_id(sg_message_id))
        return builder(event, mail)
    except ValidationError as e:
        logger.debug("Ignoring malformed %s event: %s", event_type, e.error_count())
        return None


def normalize_events(events: list) -> list[CanonicalNotification]:
    """Normalize a batch, dropping entries that produce no notification."""
    notifications = []
    for event in events:
        notification = normalize_event(event)
        if notification is not None:
            notifications.append(notification)

    dropped = len(events) - len(notifications)
    if dropped:
        logger.info("Dropped %d of %d events as malformed or unsupported", dropped, len(events))
    return notifications
