# app/routes/webhooks.py

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from ..config import settings
from ..schemas import IncomingRequest, OutgoingResponse
from ..services.dispatcher import WebhookDispatcher
from ..topics import TEMPLATES, Topic

router = APIRouter(prefix="/webhooks", tags=["webhooks"])

# Non-POST methods are routed too so the dispatcher produces the 405 body;
# verbs outside this list are answered by the app-level 405 handler in main.py
OTHER_METHODS = ["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE", "CONNECT"]

def get_webhook_secret() -> Optional[bytes]:
    return settings.webhook_secret_bytes()

def to_http(resp: OutgoingResponse, extra_headers: Optional[dict] = None) -> Response:
    headers = dict(resp.headers)
    headers.update(extra_headers or {})
    return Response(content=resp.content, status_code=resp.status_code, headers=headers)

def _make_endpoint(topic: Topic):
    async def endpoint(request: Request, secret: Optional[bytes] = Depends(get_webhook_secret)):
        raw = await request.body()
        incoming = IncomingRequest.build(request.method, request.headers, raw)
        return to_http(WebhookDispatcher(topic, secret).handle(incoming))
    endpoint.__name__ = topic.name.lower()
    return endpoint

for _topic, _tpl in TEMPLATES.items():
    _endpoint = _make_endpoint(_topic)
    router.add_api_route(f"/{_tpl.slug}", _endpoint, methods=["POST"],
                         summary=_tpl.message, name=_tpl.slug)
    router.add_api_route(f"/{_tpl.slug}", _endpoint, methods=OTHER_METHODS,
                         include_in_schema=False, name=f"{_tpl.slug}-other")
