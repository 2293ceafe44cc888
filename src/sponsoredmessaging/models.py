"""Typed request/response models for the Sponsored Messaging SDK."""

from __future__ import annotations

import os
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from sponsoredmessaging.constants import (
    API_VERSION_UNVERSIONED,
    DEFAULT_TIMEOUT_SECONDS,
    ENV_API_BASE_URL_NAME,
)
from sponsoredmessaging.errors import ConfigurationError, ValidationError

SponsorshipMode = Literal["message", "chat"]
ApiVersion = Literal["unversioned", "v1"]


class ClientConfig(BaseModel):
    """Immutable settings shared by every call a client makes."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    api_base_url: str = Field(min_length=1)
    source_app_id: Optional[str] = None
    chat_container_id: Optional[str] = None
    sponsorship_mode: Optional[SponsorshipMode] = None
    api_version: ApiVersion = API_VERSION_UNVERSIONED
    timeout: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except PydanticValidationError as exc:
            raise ConfigurationError(f"Invalid client configuration: {exc}") from exc

    @field_validator("api_base_url")
    @classmethod
    def _normalize_base_url(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value:
            raise ValueError("api_base_url must not be empty")
        return value

    @field_validator("source_app_id", "chat_container_id")
    @classmethod
    def _empty_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value

    @classmethod
    def from_values(cls, **values: Any) -> ClientConfig:
        """Build a config, reading the base URL from the environment when omitted.

        ``None`` values are treated as "not given" so callers can pass keyword
        arguments straight through.
        """
        data = {key: value for key, value in values.items() if value is not None}
        if not data.get("api_base_url"):
            env_url = os.environ.get(ENV_API_BASE_URL_NAME)
            if not env_url:
                raise ConfigurationError(
                    f"api_base_url is required (or set {ENV_API_BASE_URL_NAME})"
                )
            data["api_base_url"] = env_url
        try:
            return cls.model_validate(data)
        except PydanticValidationError as exc:
            raise ConfigurationError(f"Invalid client configuration: {exc}") from exc


class SponsorshipRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    user_message: str = Field(alias="userMessage", min_length=1)
    ai_response: str = Field(alias="aiResponse", min_length=1)
    user_session_id: Optional[str] = Field(default=None, alias="userSessionId")
    source_app_id: Optional[str] = Field(default=None, alias="sourceAppId")

    @classmethod
    def from_values(
            cls,
            *,
            user_message: Any,
            ai_response: Any,
            user_session_id: Any = None,
            source_app_id: Any = None,
    ) -> SponsorshipRequest:
        if not user_message or not ai_response:
            raise ValidationError("user_message and ai_response are required for check_sponsorship")
        try:
            return cls.model_validate(
                {
                    "userMessage": user_message,
                    "aiResponse": ai_response,
                    "userSessionId": user_session_id or None,
                    "sourceAppId": source_app_id or None,
                }
            )
        except PydanticValidationError as exc:
            raise ValidationError("Invalid sponsorship request") from exc

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ClickEvent(BaseModel):
    model_config = ConfigDict(extra="forbid")

    campaign_id: str = Field(alias="campaignId", min_length=1)
    user_session_id: Optional[str] = Field(default=None, alias="userSessionId")
    source_app_id: Optional[str] = Field(default=None, alias="sourceAppId")

    @classmethod
    def from_values(
            cls,
            *,
            campaign_id: Any,
            user_session_id: Any = None,
            source_app_id: Any = None,
    ) -> ClickEvent:
        if not campaign_id:
            raise ValidationError("campaign_id is required for track_click")
        try:
            return cls.model_validate(
                {
                    "campaignId": campaign_id,
                    "userSessionId": user_session_id or None,
                    "sourceAppId": source_app_id or None,
                }
            )
        except PydanticValidationError as exc:
            raise ValidationError("Invalid click event") from exc

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class SponsorshipResult(BaseModel):
    """Outcome of a sponsorship check.

    Keys the service sends beyond the documented ones are kept, so
    ``to_dict()`` returns the body as received.
    """

    model_config = ConfigDict(extra="allow")

    is_sponsored: bool = Field(alias="isSponsored")
    raw_content: str = Field(alias="rawContent")
    campaign_id: Optional[str] = Field(default=None, alias="campaignId")
    brand_name: Optional[str] = Field(default=None, alias="brandName")
    colour: Optional[str] = None
    cta_link: Optional[str] = Field(default=None, alias="ctaLink")
    cta_text: Optional[str] = Field(default=None, alias="ctaText")
    sponsored_content: Optional[str] = Field(default=None, alias="sponsoredContent")

    @classmethod
    def default(cls, ai_response: str) -> SponsorshipResult:
        """The non-sponsored result used whenever the service can't be relied on."""
        return cls.model_validate({"isSponsored": False, "rawContent": ai_response})

    @classmethod
    def from_json(cls, payload: Any, *, ai_response: str) -> SponsorshipResult:
        if not isinstance(payload, dict):
            raise ValidationError("response JSON must be an object")

        data = dict(payload)
        if not isinstance(data.get("rawContent"), str):
            data["rawContent"] = ai_response
        try:
            result = cls.model_validate(data)
        except PydanticValidationError as exc:
            raise ValidationError("response JSON validation failed") from exc

        # A non-sponsored turn always keeps the original answer.
        if not result.is_sponsored and result.raw_content != ai_response:
            result = result.model_copy(update={"raw_content": ai_response})
        return result

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class SponsorshipEnvelope(BaseModel):
    """``{success, data}`` wrapper used by the versioned API."""

    model_config = ConfigDict(extra="allow")

    success: bool = False
    data: Optional[dict[str, Any]] = None

    @classmethod
    def from_json(cls, payload: Any) -> SponsorshipEnvelope:
        if not isinstance(payload, dict):
            raise ValidationError("response JSON must be an object")
        try:
            return cls.model_validate(payload)
        except PydanticValidationError as exc:
            raise ValidationError("response envelope validation failed") from exc

    def unwrap(self, *, ai_response: str) -> SponsorshipResult:
        if not self.success or self.data is None:
            return SponsorshipResult.default(ai_response)
        result = SponsorshipResult.from_json(self.data, ai_response=ai_response)
        if not result.is_sponsored:
            return SponsorshipResult.default(ai_response)
        return result
