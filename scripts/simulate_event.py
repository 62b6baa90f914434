"""
Simulate SendGrid Event Webhook callbacks against a running proxy.

Usage:
    python scripts/simulate_event.py --auth "$AUTH"
    python scripts/simulate_event.py --auth "$AUTH" --event bounce --status 5.1.1
    python scripts/simulate_event.py --auth "$AUTH" --event all
"""
import argparse
import asyncio
import logging
import time
import uuid

import httpx

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

BASE_URL = "http://localhost:8000"
EVENT_TYPES = ("bounce", "delivered", "dropped", "spamreport")


def build_event(event_type: str, email: str, status: str) -> dict:
    """Build one event in SendGrid's Event Webhook format."""
    event = {
        "email": email,
        "timestamp": int(time.time()),
        "event": event_type,
        "sg_event_id": uuid.uuid4().hex,
        "sg_message_id": f"{uuid.uuid4().hex[:11]}.dfd.64b469.filter0001.16648.5515E0B88.0",
    }
    if event_type == "bounce":
        event["status"] = status
        event["reason"] = "550 5.1.1 The email account that you tried to reach does not exist."
    elif event_type == "delivered":
        event["response"] = "250 OK"
    return event


async def post_events(events: list[dict], auth: str, base_url: str) -> httpx.Response:
    """POST a batch of events to the proxy."""
    async with httpx.AsyncClient(timeout=30) as client:
        resp = await client.post(
            f"{base_url}/v1/events",
            params={"auth": auth},
            json=events,
        )
        logger.info("Event webhook response: %s %s", resp.status_code, resp.text)
        return resp


async def main():
    parser = argparse.ArgumentParser(description="Simulate SendGrid email events")
    parser.add_argument("--auth", required=True, help="Shared secret configured as AUTH")
    parser.add_argument("--event", default="delivered", choices=EVENT_TYPES + ("all",))
    parser.add_argument("--email", default="test@example.com")
    parser.add_argument("--status", default="5.1.1", help="Enhanced status code for bounces")
    parser.add_argument("--base-url", default=BASE_URL)
    args = parser.parse_args()

    event_types = EVENT_TYPES if args.event == "all" else (args.event,)
    events = [build_event(event_type, args.email, args.status) for event_type in event_types]

    logger.info("Simulating %d event(s): %s", len(events), ", ".join(event_types))
    await post_events(events, args.auth, args.base_url)


if __name__ == "__main__":
    asyncio.run(main())
