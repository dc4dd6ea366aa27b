# app/errors.py
from enum import Enum

class RejectReason(Enum):
    """Expected rejection outcomes, each with its status code and public error text."""
    METHOD_NOT_ALLOWED = (405, "Method not allowed")
    INVALID_CONTENT_TYPE = (400, "Invalid content type")
    UNAUTHORIZED_SIGNATURE = (401, "Unauthorized - Invalid HMAC signature")
    MALFORMED_PAYLOAD = (400, "Invalid JSON payload")
    INTERNAL_ERROR = (500, "Internal server error")

    @property
    def status_code(self) -> int:
        return self.value[0]

    @property
    def error(self) -> str:
        return self.value[1]

class WebhookRejected(Exception):
    def __init__(self, reason: RejectReason, detail: str | None = None):
        super().__init__(detail or reason.error)
        self.reason = reason
        self.detail = detail
