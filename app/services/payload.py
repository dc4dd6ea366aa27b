# app/services/payload.py
import json

from ..errors import RejectReason, WebhookRejected
from ..schemas import ParsedPayload

def _reject_constant(token: str):
    raise ValueError(f"non-standard JSON constant {token}")

def parse_payload(raw_body: bytes) -> ParsedPayload:
    """Strict JSON decode; the top level must be an object."""
    try:
        payload = json.loads(raw_body.decode("utf-8"), parse_constant=_reject_constant)
    except (UnicodeDecodeError, ValueError, RecursionError) as exc:
        raise WebhookRejected(RejectReason.MALFORMED_PAYLOAD, str(exc)) from exc
    if not isinstance(payload, dict):
        raise WebhookRejected(RejectReason.MALFORMED_PAYLOAD,
                              f"top level is {type(payload).__name__}, expected object")
    return payload
