"""Public package interface for sponsoredmessaging."""

from sponsoredmessaging.client import SponsoredMessaging
from sponsoredmessaging.display import SponsoredChat, SponsoredDisplay, ensure_styles
from sponsoredmessaging.dom import Document, DomEvent, Element
from sponsoredmessaging.errors import (
    ConfigurationError,
    RenderError,
    ServiceError,
    SponsoredMessagingError,
    TransportError,
    UnexpectedResponseError,
    ValidationError,
)
from sponsoredmessaging.models import (
    ClickEvent,
    ClientConfig,
    SponsorshipEnvelope,
    SponsorshipRequest,
    SponsorshipResult,
)

__all__ = [
    "SponsoredMessaging",
    "SponsoredChat",
    "SponsoredDisplay",
    "ensure_styles",
    "Document",
    "DomEvent",
    "Element",
    "ClickEvent",
    "ClientConfig",
    "SponsorshipEnvelope",
    "SponsorshipRequest",
    "SponsorshipResult",
    "SponsoredMessagingError",
    "ConfigurationError",
    "RenderError",
    "ServiceError",
    "TransportError",
    "UnexpectedResponseError",
    "ValidationError",
]
