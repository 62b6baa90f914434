"""
SendGrid Event Webhook endpoint.

Configure the webhook URL in SendGrid as https://<host>/v1/events?auth=<AUTH>.
The raw request is handed to the EventHandler in the same shape an API
gateway would deliver it, and the handler's envelope becomes the response.
Every HTTP request is authenticated, including one with an empty body.
"""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from event_proxy.services.event_handler import EventHandler

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/v1", tags=["events"])


def get_event_handler(request: Request) -> EventHandler:
    """Return the EventHandler built at startup."""
    return request.app.state.event_handler


@router.post("/events", response_class=PlainTextResponse)
async def email_events_webhook(
    request: Request,
    handler: EventHandler = Depends(get_event_handler),
):
    """
    Receive a batch of SendGrid events and forward them to the notification queues.

    The body is passed through as raw bytes; a body that isn't valid UTF-8
    JSON is a 500 and nothing is published. An empty body with valid auth
    is an empty batch.
    """
    data = {
        "body": await request.body(),
        "queryStringParameters": dict(request.query_params),
    }

    result = await handler.handle(data, require_auth=True)
    return PlainTextResponse(content=result["body"], status_code=result["statusCode"])
