from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from starlette.exceptions import HTTPException as StarletteHTTPException
from .config import settings
from .errors import RejectReason
from .routes.webhooks import router as webhooks_router, to_http
from .services.dispatcher import error_response
from .utils.logging import configure_logging

configure_logging(settings.LOG_LEVEL)

app = FastAPI(title="FloatVid Compliance Webhooks",
              description="Shopify mandatory compliance and lifecycle webhook endpoints",
    version="0.1.0",
    docs_url="/docs",          # Swagger UI
    redoc_url="/redoc",        # ReDoc
    openapi_url="/openapi.json")

app.include_router(webhooks_router)

@app.exception_handler(StarletteHTTPException)
async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
    # Router-level 405s (unrouted verbs) get the same body as the dispatcher's
    if exc.status_code == 405:
        return to_http(error_response(RejectReason.METHOD_NOT_ALLOWED), exc.headers)
    return await http_exception_handler(request, exc)

@app.get("/health")
def health():
    return {"ok": True}
