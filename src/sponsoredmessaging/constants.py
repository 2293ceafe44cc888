"""Constants for the Sponsored Messaging SDK."""

ENV_API_BASE_URL_NAME = "SPONSORED_MESSAGING_API_URL"

API_VERSION_UNVERSIONED = "unversioned"
API_VERSION_V1 = "v1"

CHECK_SPONSORSHIP_ENDPOINTS = {
    API_VERSION_UNVERSIONED: "/check-sponsorship",
    API_VERSION_V1: "/api/v1/sponsorship/check-sponsorship",
}
TRACK_CLICK_ENDPOINTS = {
    API_VERSION_UNVERSIONED: "/track-click",
    API_VERSION_V1: "/api/v1/sponsorship/track-click",
}

DEFAULT_TIMEOUT_SECONDS = 10.0

SPONSORSHIP_MODE_MESSAGE = "message"
SPONSORSHIP_MODE_CHAT = "chat"

SDK_HEADER_NAME = "X-Sponsored-Messaging-SDK"
SDK_VERSION_HEADER_NAME = "X-Sponsored-Messaging-SDK-Version"

SDK_NAME = "sponsoredmessaging-python"
SDK_VERSION = "0.1.0"

# Display defaults
STYLE_ELEMENT_ID = "sponsored-messaging-styles"
DEFAULT_BRAND_NAME = "Advertiser"
DEFAULT_CTA_TEXT = "Learn more"
DEFAULT_BORDER_COLOUR = "#d4af37"
