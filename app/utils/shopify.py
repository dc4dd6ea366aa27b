import hmac, hashlib, base64
from typing import Optional

from ..schemas import VerificationOutcome

HMAC_HEADER = "x-shopify-hmac-sha256"
TOPIC_HEADER = "x-shopify-topic"
SHOP_DOMAIN_HEADER = "x-shopify-shop-domain"
WEBHOOK_ID_HEADER = "x-shopify-webhook-id"

def compute_shopify_hmac(secret: bytes, raw_body: bytes) -> str:
    """Base64 HMAC-SHA256 of the raw body, as Shopify sends it in X-Shopify-Hmac-Sha256."""
    digest = hmac.new(secret, raw_body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")

def signatures_match(expected: str, supplied: str) -> bool:
    # compare_digest on bytes tolerates unequal lengths and non-ASCII input
    return hmac.compare_digest(expected.encode("utf-8", "surrogatepass"),
                               supplied.encode("utf-8", "surrogatepass"))

def verify_shopify_hmac(secret: Optional[bytes], raw_body: bytes,
                        header_hmac: Optional[str]) -> VerificationOutcome:
    """
    Fail closed: a missing secret or a missing signature is never a pass.
    """
    if not secret:
        return VerificationOutcome.misconfigured("SHOPIFY_WEBHOOK_SECRET not configured")
    supplied = (header_hmac or "").strip()
    if not supplied:
        return VerificationOutcome.unauthorized("missing signature")
    expected = compute_shopify_hmac(secret, raw_body)
    if not signatures_match(expected, supplied):
        return VerificationOutcome.unauthorized("signature mismatch")
    return VerificationOutcome.ok()
