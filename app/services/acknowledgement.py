# app/services/acknowledgement.py
from datetime import datetime, timezone
from typing import Any, Dict

from ..schemas import ParsedPayload, WebhookAck
from ..topics import APP_NAME, Topic, template_for

def iso_timestamp(now: datetime) -> str:
    """UTC, millisecond precision, Z suffix (2024-05-01T12:00:00.000Z)."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")

def compose_acknowledgement(topic: Topic, payload: ParsedPayload, now: datetime) -> Dict[str, Any]:
    """
    Build the 200 body for a verified webhook.
    Pure: same topic, payload and `now` give the same dict. Missing payload
    fields come back as None; customer_id only appears for topics that carry one.
    """
    tpl = template_for(topic)
    fields: Dict[str, Any] = {
        "message": tpl.message,
        "app": APP_NAME,
        "response": tpl.response_text,
        "shop_id": tpl.shop_id(payload),
        "shop_domain": tpl.shop_domain(payload),
        "timestamp": iso_timestamp(now),
    }
    if tpl.customer_id is not None:
        fields["customer_id"] = tpl.customer_id(payload)
    return WebhookAck(**fields).model_dump(exclude_unset=True)
