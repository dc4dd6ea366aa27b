# app/topics.py
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from .schemas import ParsedPayload

APP_NAME = "FloatVid"

Extractor = Callable[[ParsedPayload], Any]

class Topic(str, Enum):
    APP_UNINSTALLED = "app/uninstalled"
    CUSTOMERS_DATA_REQUEST = "customers/data_request"
    CUSTOMERS_REDACT = "customers/redact"
    SHOP_REDACT = "shop/redact"
    SCOPES_UPDATE = "app/scopes_update"

def top_level(name: str) -> Extractor:
    return lambda payload: payload.get(name)

def nested_id(name: str) -> Extractor:
    """payload[name]["id"], or None when the parent is missing or not an object."""
    def extract(payload: ParsedPayload) -> Any:
        parent = payload.get(name)
        if isinstance(parent, dict):
            return parent.get("id")
        return None
    return extract

@dataclass(frozen=True)
class AcknowledgementTemplate:
    slug: str
    label: str
    message: str
    response_text: str
    shop_id: Extractor
    shop_domain: Extractor
    customer_id: Optional[Extractor] = None

# Lifecycle topics carry the shop as a top-level record (id/domain);
# compliance topics use shop_id/shop_domain.
TEMPLATES: Dict[Topic, AcknowledgementTemplate] = {
    Topic.APP_UNINSTALLED: AcknowledgementTemplate(
        slug="app-uninstalled",
        label="app uninstall notification",
        message="App uninstall notification processed successfully",
        response_text=(
            "FloatVid has been uninstalled. All theme settings have been automatically removed. "
            "No further cleanup required."
        ),
        shop_id=top_level("id"),
        shop_domain=top_level("domain"),
    ),
    Topic.CUSTOMERS_DATA_REQUEST: AcknowledgementTemplate(
        slug="customers-data-request",
        label="customer data request",
        message="Customer data request processed successfully",
        response_text=(
            "No personal customer data is stored by FloatVid. FloatVid only stores theme "
            "customization settings (video URLs, colors, fonts, positioning) which contain "
            "no personal information."
        ),
        shop_id=top_level("shop_id"),
        shop_domain=top_level("shop_domain"),
    ),
    Topic.CUSTOMERS_REDACT: AcknowledgementTemplate(
        slug="customers-redact",
        label="customer redact request",
        message="Customer data redaction processed successfully",
        response_text=(
            "No personal customer data to redact. FloatVid does not store any personal "
            "customer information that requires deletion."
        ),
        shop_id=top_level("shop_id"),
        shop_domain=top_level("shop_domain"),
        customer_id=nested_id("customer"),
    ),
    Topic.SHOP_REDACT: AcknowledgementTemplate(
        slug="shop-redact",
        label="shop redact request",
        message="Shop data redaction processed successfully",
        response_text=(
            "Shop data redaction completed. FloatVid theme settings are automatically removed "
            "when the app is uninstalled. No additional shop data requires manual deletion."
        ),
        shop_id=top_level("shop_id"),
        shop_domain=top_level("shop_domain"),
    ),
    Topic.SCOPES_UPDATE: AcknowledgementTemplate(
        slug="scopes-update",
        label="scopes update notification",
        message="Scopes update notification processed successfully",
        response_text=(
            "App permissions have been updated successfully. FloatVid will continue to "
            "function with the new scope configuration."
        ),
        shop_id=top_level("id"),
        shop_domain=top_level("domain"),
    ),
}

def template_for(topic: Topic) -> AcknowledgementTemplate:
    return TEMPLATES[topic]
