# app/services/envelope.py
from ..errors import RejectReason, WebhookRejected
from ..schemas import IncomingRequest

JSON_MEDIA_TYPE = "application/json"

def check_method(request: IncomingRequest) -> None:
    # Methods are case-sensitive; "post" is not POST
    if request.method != "POST":
        raise WebhookRejected(RejectReason.METHOD_NOT_ALLOWED, f"method {request.method!r}")

def check_content_type(request: IncomingRequest) -> None:
    """Runs before any HMAC work."""
    content_type = request.headers.get("content-type")
    if not content_type or JSON_MEDIA_TYPE not in content_type.lower():
        raise WebhookRejected(RejectReason.INVALID_CONTENT_TYPE, f"content-type {content_type!r}")
