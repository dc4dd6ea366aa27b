# app/services/dispatcher.py
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional, Tuple

from ..errors import RejectReason, WebhookRejected
from ..schemas import ErrorBody, IncomingRequest, OutgoingResponse, VerificationStatus
from ..topics import Topic, template_for
from ..utils.logging import logger
from ..utils.shopify import (
    HMAC_HEADER, SHOP_DOMAIN_HEADER, TOPIC_HEADER, WEBHOOK_ID_HEADER, verify_shopify_hmac,
)
from .acknowledgement import compose_acknowledgement
from .envelope import check_content_type, check_method
from .payload import parse_payload

class Stage(str, Enum):
    RECEIVED = "received"
    METHOD_CHECKED = "method_checked"
    CONTENT_TYPE_CHECKED = "content_type_checked"
    SIGNATURE_VERIFIED = "signature_verified"
    PAYLOAD_PARSED = "payload_parsed"
    RESPONDED = "responded"
    REJECTED = "rejected"
    INTERNAL_ERROR = "internal_error"

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

def error_response(reason: RejectReason) -> OutgoingResponse:
    return OutgoingResponse.render(reason.status_code, ErrorBody(error=reason.error).model_dump())

class WebhookDispatcher:
    """
    Runs one webhook request through envelope -> HMAC -> JSON -> acknowledgement.
    Bound to a single topic and secret at construction; holds no per-request state,
    so one instance can serve concurrent requests.
    """

    def __init__(self, topic: Topic, secret: Optional[bytes],
                 clock: Callable[[], datetime] = _utcnow):
        self.topic = topic
        self.template = template_for(topic)
        self._secret = secret
        self._clock = clock

    def handle(self, request: IncomingRequest) -> OutgoingResponse:
        return self.run(request)[1]

    def run(self, request: IncomingRequest) -> Tuple[Stage, OutgoingResponse]:
        """Returns the terminal stage (RESPONDED, REJECTED or INTERNAL_ERROR) with the response."""
        stage = Stage.RECEIVED
        try:
            check_method(request)
            stage = Stage.METHOD_CHECKED

            check_content_type(request)
            stage = Stage.CONTENT_TYPE_CHECKED

            self._verify(request)
            stage = Stage.SIGNATURE_VERIFIED

            payload = parse_payload(request.raw_body)
            stage = Stage.PAYLOAD_PARSED

            self._log_accepted(request, payload)
            body = compose_acknowledgement(self.topic, payload, self._clock())
            return Stage.RESPONDED, OutgoingResponse.render(200, body)
        except WebhookRejected as rej:
            logger.info("Rejected %s after %s: %s (%s)", self.template.label,
                        stage.value, rej.reason.name, rej.detail or rej.reason.error)
            return Stage.REJECTED, error_response(rej.reason)
        except Exception:
            logger.exception("Error processing %s after %s", self.template.label, stage.value)
            return Stage.INTERNAL_ERROR, error_response(RejectReason.INTERNAL_ERROR)

    def _verify(self, request: IncomingRequest) -> None:
        outcome = verify_shopify_hmac(self._secret, request.raw_body, request.headers.get(HMAC_HEADER))
        if outcome.status is VerificationStatus.MISCONFIGURED:
            logger.error("Cannot verify %s: %s", self.template.label, outcome.reason)
        elif outcome.status is VerificationStatus.UNAUTHORIZED:
            logger.warning("Invalid HMAC signature for %s (%s) - returning 401",
                           self.template.label, outcome.reason)
        if not outcome.verified:
            raise WebhookRejected(RejectReason.UNAUTHORIZED_SIGNATURE, outcome.reason)

    def _log_accepted(self, request: IncomingRequest, payload: dict) -> None:
        header_topic = request.headers.get(TOPIC_HEADER)
        if header_topic and header_topic != self.topic.value:
            logger.warning("X-Shopify-Topic %r does not match endpoint topic %r; using %r",
                           header_topic, self.topic.value, self.topic.value)
        logger.info("Valid %s received: shop=%s webhook_id=%s keys=%s",
                    self.template.label,
                    request.headers.get(SHOP_DOMAIN_HEADER, "unknown"),
                    request.headers.get(WEBHOOK_ID_HEADER),
                    sorted(payload.keys()))
