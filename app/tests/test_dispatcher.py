import base64, hashlib, hmac, json, logging
from datetime import datetime, timezone

import pytest

from app.schemas import IncomingRequest
from app.services import dispatcher as dispatcher_mod
from app.services.dispatcher import Stage, WebhookDispatcher
from app.topics import Topic

SECRET = b"test-secret"
NOW = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
PAYLOAD = {"shop_id": 42, "shop_domain": "foo.myshopify.com"}

def _sign(body: bytes, secret: bytes = SECRET) -> str:
    return base64.b64encode(hmac.new(secret, body, hashlib.sha256).digest()).decode()

def _request(body=None, method="POST", content_type="application/json", signature="auto", extra=None):
    raw = json.dumps(PAYLOAD if body is None else body).encode() if not isinstance(body, bytes) else body
    headers = dict(extra or {})
    if content_type is not None:
        headers["Content-Type"] = content_type
    if signature == "auto":
        headers["X-Shopify-Hmac-Sha256"] = _sign(raw)
    elif signature is not None:
        headers["X-Shopify-Hmac-Sha256"] = signature
    return IncomingRequest.build(method, headers, raw)

def _dispatcher(topic=Topic.CUSTOMERS_DATA_REQUEST, secret=SECRET):
    return WebhookDispatcher(topic, secret, clock=lambda: NOW)

def test_valid_request_responds_200():
    stage, resp = _dispatcher().run(_request())
    assert stage is Stage.RESPONDED
    assert resp.status_code == 200
    assert resp.headers == {"Content-Type": "application/json"}
    assert resp.body["app"] == "FloatVid"
    assert resp.body["shop_id"] == 42
    assert resp.body["shop_domain"] == "foo.myshopify.com"
    assert resp.body["timestamp"] == "2024-01-02T03:04:05.000Z"

@pytest.mark.parametrize("topic", list(Topic))
def test_every_topic_acknowledges(topic):
    resp = _dispatcher(topic).handle(_request())
    assert resp.status_code == 200
    assert resp.body["app"] == "FloatVid"

@pytest.mark.parametrize("method", ["GET", "PUT", "DELETE", "HEAD"])
def test_non_post_is_405_regardless_of_other_fields(method):
    stage, resp = _dispatcher(secret=None).run(_request(b"garbage", method=method,
                                                        content_type=None, signature=None))
    assert stage is Stage.REJECTED
    assert resp.status_code == 405
    assert resp.body == {"error": "Method not allowed"}

def test_bad_content_type_is_400():
    resp = _dispatcher().handle(_request(content_type="text/plain"))
    assert resp.status_code == 400
    assert resp.body == {"error": "Invalid content type"}

@pytest.mark.parametrize("signature", [None, "", "0123456789", "x" * 44])
def test_absent_or_tampered_signature_is_401(signature):
    resp = _dispatcher().handle(_request(signature=signature))
    assert resp.status_code == 401
    assert resp.body == {"error": "Unauthorized - Invalid HMAC signature"}

def test_signature_over_other_body_is_401():
    resp = _dispatcher().handle(_request(signature=_sign(b'{"shop_id": 43}')))
    assert resp.status_code == 401

def test_unconfigured_secret_fails_closed(caplog):
    with caplog.at_level(logging.ERROR, logger="floatvid"):
        resp = _dispatcher(secret=None).handle(_request())
    assert resp.status_code == 401
    assert "not configured" in caplog.text

def test_valid_signature_invalid_json_is_400():
    raw = b"{not json"
    stage, resp = _dispatcher().run(_request(raw, signature=_sign(raw)))
    assert stage is Stage.REJECTED
    assert resp.status_code == 400
    assert resp.body == {"error": "Invalid JSON payload"}

def test_signature_checked_before_json():
    raw = b"{not json"
    resp = _dispatcher().handle(_request(raw, signature=_sign(raw, b"wrong")))
    assert resp.status_code == 401

def test_unexpected_failure_is_500(monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("kaboom")
    monkeypatch.setattr(dispatcher_mod, "compose_acknowledgement", boom)
    stage, resp = _dispatcher().run(_request())
    assert stage is Stage.INTERNAL_ERROR
    assert resp.status_code == 500
    assert resp.body == {"error": "Internal server error"}

def test_topic_header_mismatch_does_not_change_topic(caplog):
    req = _request(extra={"X-Shopify-Topic": "shop/redact"})
    with caplog.at_level(logging.WARNING, logger="floatvid"):
        resp = _dispatcher(Topic.CUSTOMERS_DATA_REQUEST).handle(req)
    assert resp.status_code == 200
    assert resp.body["message"] == "Customer data request processed successfully"
    assert "does not match" in caplog.text

def test_lowercase_post_is_405():
    resp = _dispatcher().handle(_request(method="post"))
    assert resp.status_code == 405

def test_lone_surrogate_in_copied_field_renders():
    raw = b'{"shop_id": 1, "shop_domain": "\\ud800"}'
    stage, resp = _dispatcher(Topic.SHOP_REDACT).run(_request(raw, signature=_sign(raw)))
    assert stage is Stage.RESPONDED
    assert resp.status_code == 200
    assert b'"shop_domain": "\\ud800"' in resp.content
    assert json.loads(resp.content)["shop_domain"] == "\ud800"

def test_rendered_content_matches_body():
    for req in (_request(), _request(signature=None), _request(method="GET")):
        resp = _dispatcher().handle(req)
        assert json.loads(resp.content) == resp.body
