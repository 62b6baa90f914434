"""
Request handler - the single entry point for SendGrid Event Webhook payloads.

Accepts either an API-style request ({"body": "<json>", "queryStringParameters":
{"auth": "..."}}) or a direct invocation carrying already-parsed event(s).
Always returns a response envelope; exceptions never escape.
"""
import json
import logging
from typing import Any

from event_proxy.exceptions import AuthenticationError
from event_proxy.services.dispatcher import Dispatcher
from event_proxy.services.normalizer import normalize_events
from event_proxy.utils.auth import Authenticator

logger = logging.getLogger(__name__)


def make_response(status_code: int, body: str) -> dict:
    return {
        "statusCode": status_code,
        "body": body,
        "isBase64Encoded": False,
    }


def coerce_batch(payload: Any) -> list:
    """Wrap a single event in a list; lists pass through unchanged."""
    if isinstance(payload, list):
        return payload
    return [payload]


class EventHandler:
    """Authenticates, normalizes and dispatches one webhook request."""

    def __init__(self, authenticator: Authenticator, dispatcher: Dispatcher):
        self.authenticator = authenticator
        self.dispatcher = dispatcher

    def _authenticate(self, data: dict) -> None:
        params = data.get("queryStringParameters") or {}
        auth = params.get("auth") if isinstance(params, dict) else None
        if not auth or not self.authenticator.authenticate(auth):
            raise AuthenticationError("Invalid or missing auth parameter")

    def _extract_payload(self, data: Any, require_auth: bool) -> Any:
        """
        Return the event payload, authenticating first if the request has a body.

        The body may be str or raw bytes; bytes must be valid UTF-8 JSON.
        With require_auth, the request is authenticated even without a body
        and an empty body is an empty batch.
        """
        if isinstance(data, dict) and (require_auth or data.get("body")):
            self._authenticate(data)
            body = data.get("body")
            if isinstance(body, bytes):
                body = body.decode("utf-8")
            return json.loads(body) if body else []
        return data

    async def handle(self, data: Any, require_auth: bool = False) -> dict:
        try:
            payload = self._extract_payload(data, require_auth)
            events = coerce_batch(payload)
            notifications = normalize_events(events)
            results = await self.dispatcher.dispatch(notifications)
        except AuthenticationError:
            logger.warning("Rejected event webhook: authentication failed")
            return make_response(401, "Unauthorized")
        except Exception:
            logger.exception("Event webhook processing failed")
            return make_response(500, "Internal Server Error")

        logger.info(
            "Processed %d events",
            len(results),
            extra={"event_count": len(events), "dispatched": len(results)},
        )
        return make_response(200, f"Processed {len(results)} events")
