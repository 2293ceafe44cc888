"""HTTP client for the Sponsored Messaging SDK."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import httpx

from sponsoredmessaging.constants import (
    API_VERSION_V1,
    CHECK_SPONSORSHIP_ENDPOINTS,
    SDK_HEADER_NAME,
    SDK_NAME,
    SDK_VERSION,
    SDK_VERSION_HEADER_NAME,
    TRACK_CLICK_ENDPOINTS,
)
from sponsoredmessaging.errors import (
    ServiceError,
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

logger = logging.getLogger(__name__)

SUCCESS_MIN = 200
SUCCESS_MAX = 299

# Failures that degrade to the default result instead of reaching the caller.
DEGRADABLE_ERRORS = (ServiceError, TransportError, UnexpectedResponseError)


class SponsoredMessaging:
    """Client for the sponsorship check and click tracking endpoints."""

    def __init__(
            self,
            config: Optional[ClientConfig] = None,
            *,
            api_base_url: Optional[str] = None,
            source_app_id: Optional[str] = None,
            api_version: Optional[str] = None,
            timeout: Optional[float] = None,
            http_client: Optional[httpx.Client] = None,
            async_http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: Ready-made configuration. When given, the keyword fields below are ignored.
            api_base_url: Base URL of the sponsorship service. Falls back to the
                SPONSORED_MESSAGING_API_URL environment variable.
            source_app_id: Application id sent with every request unless a call overrides it.
            api_version: "unversioned" (default) or "v1".
            timeout: Per-request timeout in seconds. Defaults to 10.
            http_client: Custom HTTP client instance. If None, creates a new one.
            async_http_client: Custom async HTTP client instance. If None, creates a new one.

        Raises:
            ConfigurationError: If the base URL is missing or a setting is invalid.
        """
        if config is None:
            config = ClientConfig.from_values(
                api_base_url=api_base_url,
                source_app_id=source_app_id,
                api_version=api_version,
                timeout=timeout,
            )
        self._config = config
        self._client = http_client or httpx.Client(timeout=config.timeout)
        self._async_client = async_http_client or httpx.AsyncClient(timeout=config.timeout)
        self._owns_client = http_client is None
        self._owns_async_client = async_http_client is None
        logger.info("SponsoredMessaging SDK initialized with API base URL: %s", config.api_base_url)

    @property
    def config(self) -> ClientConfig:
        return self._config

    def close(self) -> None:
        """Close the HTTP client connection if owned by this instance."""
        if self._owns_client:
            self._client.close()

    async def aclose(self) -> None:
        """Close the async HTTP client connection if owned by this instance."""
        if self._owns_async_client:
            await self._async_client.aclose()

    def __enter__(self) -> SponsoredMessaging:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    async def __aenter__(self) -> SponsoredMessaging:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def check_sponsorship(
            self,
            *,
            user_message: str,
            ai_response: str,
            user_session_id: Optional[str] = None,
            source_app_id: Optional[str] = None,
    ) -> SponsorshipResult:
        """
        Ask the service whether this chat turn should carry sponsored content.

        Args:
            user_message: The user's message.
            ai_response: The AI's response to it.
            user_session_id: Optional session id, passed through for analytics.
            source_app_id: Optional application id; defaults to the configured one.

        Returns:
            SponsorshipResult: The service's answer, or
            ``{isSponsored: False, rawContent: ai_response}`` when the service
            fails, times out or answers with something that isn't valid JSON.

        Raises:
            ValidationError: If user_message or ai_response is empty. No request is sent.
        """
        request = self._build_sponsorship_request(
            user_message=user_message,
            ai_response=ai_response,
            user_session_id=user_session_id,
            source_app_id=source_app_id,
        )
        url = self._endpoint(CHECK_SPONSORSHIP_ENDPOINTS)
        payload = request.to_payload()
        logger.debug("Calling POST %s with body: %s", url, payload)

        try:
            data = self._post(url, payload)
            result = self._parse_sponsorship(data, ai_response=ai_response)
        except DEGRADABLE_ERRORS as exc:
            _log_failure("Sponsorship check failed", url, exc)
            return SponsorshipResult.default(ai_response)

        logger.debug("Sponsorship check successful. Response: %s", result.to_dict())
        return result

    async def check_sponsorship_async(
            self,
            *,
            user_message: str,
            ai_response: str,
            user_session_id: Optional[str] = None,
            source_app_id: Optional[str] = None,
    ) -> SponsorshipResult:
        """Async version of check_sponsorship(), with the same fallback guarantee."""
        request = self._build_sponsorship_request(
            user_message=user_message,
            ai_response=ai_response,
            user_session_id=user_session_id,
            source_app_id=source_app_id,
        )
        url = self._endpoint(CHECK_SPONSORSHIP_ENDPOINTS)
        payload = request.to_payload()
        logger.debug("Calling async POST %s with body: %s", url, payload)

        try:
            data = await self._post_async(url, payload)
            result = self._parse_sponsorship(data, ai_response=ai_response)
        except DEGRADABLE_ERRORS as exc:
            _log_failure("Sponsorship check failed", url, exc)
            return SponsorshipResult.default(ai_response)

        logger.debug("Sponsorship check successful. Response: %s", result.to_dict())
        return result

    def track_click(
            self,
            *,
            campaign_id: str,
            user_session_id: Optional[str] = None,
            source_app_id: Optional[str] = None,
    ) -> None:
        """
        Report a click on sponsored content.

        Errors from the service or the network are logged and swallowed so that
        tracking never interrupts navigation.

        Raises:
            ValidationError: If campaign_id is empty. No request is sent.
        """
        event = self._build_click_event(
            campaign_id=campaign_id,
            user_session_id=user_session_id,
            source_app_id=source_app_id,
        )
        url = self._endpoint(TRACK_CLICK_ENDPOINTS)
        payload = event.to_payload()
        logger.debug("Calling POST %s with body: %s", url, payload)

        try:
            self._post(url, payload, parse_json=False)
        except DEGRADABLE_ERRORS as exc:
            _log_failure("Click tracking failed", url, exc)
            return
        logger.debug("Click tracking request sent successfully.")

    async def track_click_async(
            self,
            *,
            campaign_id: str,
            user_session_id: Optional[str] = None,
            source_app_id: Optional[str] = None,
    ) -> None:
        """Async version of track_click()."""
        event = self._build_click_event(
            campaign_id=campaign_id,
            user_session_id=user_session_id,
            source_app_id=source_app_id,
        )
        url = self._endpoint(TRACK_CLICK_ENDPOINTS)
        payload = event.to_payload()
        logger.debug("Calling async POST %s with body: %s", url, payload)

        try:
            await self._post_async(url, payload, parse_json=False)
        except DEGRADABLE_ERRORS as exc:
            _log_failure("Click tracking failed", url, exc)
            return
        logger.debug("Click tracking request sent successfully.")

    def _build_sponsorship_request(
            self,
            *,
            user_message: str,
            ai_response: str,
            user_session_id: Optional[str],
            source_app_id: Optional[str],
    ) -> SponsorshipRequest:
        return SponsorshipRequest.from_values(
            user_message=user_message,
            ai_response=ai_response,
            user_session_id=user_session_id,
            source_app_id=source_app_id or self._config.source_app_id,
        )

    def _build_click_event(
            self,
            *,
            campaign_id: str,
            user_session_id: Optional[str],
            source_app_id: Optional[str],
    ) -> ClickEvent:
        return ClickEvent.from_values(
            campaign_id=campaign_id,
            user_session_id=user_session_id,
            source_app_id=source_app_id or self._config.source_app_id,
        )

    def _endpoint(self, endpoints: dict[str, str]) -> str:
        """
        Get the full URL of an endpoint for the configured API version.

        Returns:
            str: Base URL joined with the versioned path
        """
        return f"{self._config.api_base_url}{endpoints[self._config.api_version]}"

    def _build_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            SDK_HEADER_NAME: SDK_NAME,
            SDK_VERSION_HEADER_NAME: SDK_VERSION,
        }

    def _post(self, url: str, payload: dict[str, Any], *, parse_json: bool = True) -> Any:
        """
        Send a single POST request. There are no retries.

        Raises:
            TransportError: If the request fails before a response arrives
            ServiceError: If the response status is not 2xx
            UnexpectedResponseError: If parse_json is set and the body is not JSON
        """
        try:
            response = self._client.post(
                url, json=payload, headers=self._build_headers(), timeout=self._config.timeout
            )
        except httpx.RequestError as exc:
            raise TransportError("Network error during request", original_error=exc) from exc
        return self._handle_response(response, parse_json=parse_json)

    async def _post_async(
            self, url: str, payload: dict[str, Any], *, parse_json: bool = True
    ) -> Any:
        """Async version of _post."""
        try:
            response = await self._async_client.post(
                url, json=payload, headers=self._build_headers(), timeout=self._config.timeout
            )
        except httpx.RequestError as exc:
            raise TransportError("Network error during request", original_error=exc) from exc
        return self._handle_response(response, parse_json=parse_json)

    def _handle_response(self, response: httpx.Response, *, parse_json: bool) -> Any:
        status = response.status_code
        if not SUCCESS_MIN <= status <= SUCCESS_MAX:
            raise ServiceError(
                f"API error {status}: {response.reason_phrase}",
                status_code=status,
                response_snippet=_snippet(response),
            )
        if not parse_json:
            return None

        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise UnexpectedResponseError(
                "Invalid JSON response",
                status_code=status,
                response_snippet=_snippet(response),
            ) from exc

    def _parse_sponsorship(self, data: Any, *, ai_response: str) -> SponsorshipResult:
        try:
            if self._config.api_version == API_VERSION_V1:
                return SponsorshipEnvelope.from_json(data).unwrap(ai_response=ai_response)
            return SponsorshipResult.from_json(data, ai_response=ai_response)
        except ValidationError as exc:
            raise UnexpectedResponseError("Unexpected response structure") from exc


def _log_failure(message: str, url: str, exc: Exception) -> None:
    if isinstance(exc, ServiceError):
        logger.error(
            "%s: %s. URL: %s. Body: %s", message, exc, url, exc.response_snippet
        )
    else:
        logger.error("%s calling %s", message, url, exc_info=exc)


def _snippet(response: httpx.Response, limit: int = 200) -> Optional[str]:
    """
    Extract a snippet from HTTP response text for logging purposes.

    Args:
        response: HTTP response object from httpx
        limit: Maximum number of characters to include in snippet

    Returns:
        Optional[str]: Truncated response text or None if the body is empty
    """
    if not response.text:
        return None
    return response.text[:limit]
