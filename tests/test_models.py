import pytest
from pydantic import ValidationError as PydanticValidationError

from sponsoredmessaging.errors import ConfigurationError, ValidationError
from sponsoredmessaging.models import (
    ClickEvent,
    ClientConfig,
    SponsorshipEnvelope,
    SponsorshipRequest,
    SponsorshipResult,
)


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://x.test/", "https://x.test"),
        ("https://x.test", "https://x.test"),
        ("https://x.test/api//", "https://x.test/api"),
    ],
)
def test_base_url_has_no_trailing_slash(url: str, expected: str) -> None:
    assert ClientConfig.from_values(api_base_url=url).api_base_url == expected


def test_config_is_immutable() -> None:
    config = ClientConfig.from_values(api_base_url="https://x.test")

    with pytest.raises(PydanticValidationError):
        config.api_base_url = "https://other.test"


def test_config_rejects_unknown_mode() -> None:
    with pytest.raises(ConfigurationError):
        ClientConfig.from_values(api_base_url="https://x.test", sponsorship_mode="popup")


def test_config_rejects_slash_only_url() -> None:
    with pytest.raises(ConfigurationError):
        ClientConfig.from_values(api_base_url="/")


def test_request_payload_uses_wire_names() -> None:
    request = SponsorshipRequest.from_values(
        user_message="hi", ai_response="hello", user_session_id="s1"
    )

    assert request.to_payload() == {
        "userMessage": "hi",
        "aiResponse": "hello",
        "userSessionId": "s1",
    }


def test_request_rejects_non_string() -> None:
    with pytest.raises(ValidationError):
        SponsorshipRequest.from_values(user_message=42, ai_response="hello")


def test_click_event_empty_session_is_omitted() -> None:
    event = ClickEvent.from_values(campaign_id="c1", user_session_id="")

    assert event.to_payload() == {"campaignId": "c1"}


def test_sponsored_result_without_raw_content_uses_ai_response() -> None:
    result = SponsorshipResult.from_json(
        {"isSponsored": True, "campaignId": "c1"}, ai_response="original"
    )

    assert result.is_sponsored is True
    assert result.raw_content == "original"


def test_result_rejects_non_boolean_flag() -> None:
    with pytest.raises(ValidationError):
        SponsorshipResult.from_json({"rawContent": "x", "isSponsored": "maybe"}, ai_response="y")


def test_envelope_unwrap() -> None:
    envelope = SponsorshipEnvelope.from_json(
        {"success": True, "data": {"isSponsored": True, "rawContent": "ad", "brandName": "Acme"}}
    )

    result = envelope.unwrap(ai_response="original")

    assert result.brand_name == "Acme"
    assert result.raw_content == "ad"


def test_string_false_flag_replaces_raw_content() -> None:
    result = SponsorshipResult.from_json(
        {"isSponsored": "false", "rawContent": "service text"}, ai_response="original"
    )

    assert result.is_sponsored is False
    assert result.raw_content == "original"


def test_envelope_with_string_false_flag_gives_default() -> None:
    envelope = SponsorshipEnvelope.from_json(
        {"success": True, "data": {"isSponsored": "off", "rawContent": "service text"}}
    )

    assert envelope.unwrap(ai_response="original").to_dict() == {
        "isSponsored": False,
        "rawContent": "original",
    }


@pytest.mark.parametrize(
    "values",
    [
        {"api_base_url": ""},
        {"api_base_url": "https://x.test", "timeout": 0},
        {"api_base_url": "https://x.test", "api_version": "v9"},
    ],
)
def test_direct_construction_raises_configuration_error(values: dict) -> None:
    with pytest.raises(ConfigurationError):
        ClientConfig(**values)
