import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel
from starlette.datastructures import Headers

JSON_HEADERS = {"Content-Type": "application/json"}

# Parsed webhook body; every key is optional
ParsedPayload = Dict[str, Any]

@dataclass(frozen=True)
class IncomingRequest:
    method: str
    headers: Headers
    raw_body: bytes = b""

    @classmethod
    def build(cls, method: str, headers: Union[Mapping[str, str], Headers, None] = None,
              raw_body: bytes = b"") -> "IncomingRequest":
        if not isinstance(headers, Headers):
            headers = Headers(headers=dict(headers or {}))
        return cls(method=method, headers=headers, raw_body=raw_body)

@dataclass(frozen=True)
class OutgoingResponse:
    status_code: int
    body: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=lambda: dict(JSON_HEADERS))
    content: bytes = b""

    @classmethod
    def render(cls, status_code: int, body: Dict[str, Any]) -> "OutgoingResponse":
        # ASCII escapes keep lone surrogates copied from the payload encodable
        content = json.dumps(body, ensure_ascii=True, allow_nan=False).encode("ascii")
        return cls(status_code=status_code, body=body, content=content)

class VerificationStatus(str, Enum):
    VERIFIED = "verified"
    UNAUTHORIZED = "unauthorized"
    MISCONFIGURED = "misconfigured"

@dataclass(frozen=True)
class VerificationOutcome:
    status: VerificationStatus
    reason: Optional[str] = None

    @property
    def verified(self) -> bool:
        return self.status is VerificationStatus.VERIFIED

    @classmethod
    def ok(cls) -> "VerificationOutcome":
        return cls(VerificationStatus.VERIFIED)

    @classmethod
    def unauthorized(cls, reason: str) -> "VerificationOutcome":
        return cls(VerificationStatus.UNAUTHORIZED, reason)

    @classmethod
    def misconfigured(cls, reason: str) -> "VerificationOutcome":
        return cls(VerificationStatus.MISCONFIGURED, reason)

class WebhookAck(BaseModel):
    message: str
    app: str
    response: str
    shop_id: Optional[Any] = None
    shop_domain: Optional[Any] = None
    customer_id: Optional[Any] = None
    timestamp: str

class ErrorBody(BaseModel):
    error: str
