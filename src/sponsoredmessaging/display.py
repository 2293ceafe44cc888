"""Rendering of sponsored results into a host document's chat surface."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from sponsoredmessaging.client import SponsoredMessaging
from sponsoredmessaging.constants import (
    API_VERSION_V1,
    DEFAULT_BORDER_COLOUR,
    DEFAULT_BRAND_NAME,
    DEFAULT_CTA_TEXT,
    SPONSORSHIP_MODE_CHAT,
    SPONSORSHIP_MODE_MESSAGE,
    STYLE_ELEMENT_ID,
)
from sponsoredmessaging.dom import Document, DomEvent, Element
from sponsoredmessaging.errors import ConfigurationError, RenderError
from sponsoredmessaging.models import ClientConfig, SponsorshipResult

logger = logging.getLogger(__name__)

BLOCK_CLASS = "sm-sponsored-block"
CHAT_WRAPPER_CLASS = "sm-sponsored-chat"
HEADER_CLASS = "sm-sponsored-header"
BODY_CLASS = "sm-sponsored-body"
FOOTER_CLASS = "sm-sponsored-footer"
CTA_CLASS = "sm-sponsored-cta"

STYLESHEET = f"""
.{BLOCK_CLASS}, .{CHAT_WRAPPER_CLASS} {{
  border: 2px solid {DEFAULT_BORDER_COLOUR};
  border-radius: 8px;
  padding: 12px;
  margin: 8px 0;
}}
.{HEADER_CLASS} {{
  font-size: 0.75rem;
  text-transform: uppercase;
  letter-spacing: 0.05em;
  opacity: 0.7;
  margin-bottom: 6px;
}}
.{FOOTER_CLASS} {{
  margin-top: 8px;
  text-align: right;
}}
.{CTA_CLASS} {{
  font-weight: 600;
  text-decoration: none;
}}
"""


def ensure_styles(document: Document) -> Element:
    """Add the SDK stylesheet to ``document`` once; later calls return the existing one."""
    existing = document.get_element_by_id(STYLE_ELEMENT_ID)
    if existing is not None:
        return existing
    style = document.create_element("style", text=STYLESHEET)
    style.id = STYLE_ELEMENT_ID
    document.head.append_child(style)
    return style


class SponsoredDisplay:
    """Draws sponsored results into the chat container of a document.

    ``message`` mode appends one block per sponsored turn. ``chat`` mode wraps
    the whole chat container the first time and ignores later turns.
    """

    def __init__(
            self,
            *,
            client: SponsoredMessaging,
            document: Document,
            chat_container_id: str,
            sponsorship_mode: str,
    ) -> None:
        if not chat_container_id:
            raise ConfigurationError("chat_container_id is required for sponsored display")
        if sponsorship_mode not in {SPONSORSHIP_MODE_MESSAGE, SPONSORSHIP_MODE_CHAT}:
            raise ConfigurationError("sponsorship_mode must be 'message' or 'chat'")

        self._client = client
        self._document = document
        self._chat_container_id = chat_container_id
        self._mode = sponsorship_mode
        self._chat_wrapper: Optional[Element] = None

    @property
    def chat_wrapped(self) -> bool:
        return self._chat_wrapper is not None

    def render(
            self,
            result: SponsorshipResult,
            *,
            user_session_id: Optional[str] = None,
    ) -> Optional[Element]:
        """
        Insert ``result`` into the chat surface.

        Returns:
            The inserted block or chat wrapper, or None when nothing was drawn
            (not sponsored, or the chat container is missing).
        """
        if not result.is_sponsored:
            return None

        try:
            container = self._chat_container()
        except RenderError as exc:
            logger.error("Sponsored content not rendered: %s", exc)
            return None

        ensure_styles(self._document)
        if self._mode == SPONSORSHIP_MODE_CHAT:
            return self._wrap_chat(container, result, user_session_id)
        return self._append_block(container, result, user_session_id)

    def _chat_container(self) -> Element:
        container = self._document.get_element_by_id(self._chat_container_id)
        if container is None:
            raise RenderError(f"chat container #{self._chat_container_id} not found")
        return container

    def _append_block(
            self,
            container: Element,
            result: SponsorshipResult,
            user_session_id: Optional[str],
    ) -> Element:
        block = self._panel(BLOCK_CLASS, result)
        block.append_child(self._header(result))
        body = self._document.create_element("div", text=result.raw_content)
        body.add_class(BODY_CLASS)
        block.append_child(body)
        footer = self._footer(result, user_session_id)
        if footer is not None:
            block.append_child(footer)
        container.append_child(block)
        logger.debug("Appended sponsored block for campaign %s", result.campaign_id)
        return block

    def _wrap_chat(
            self,
            container: Element,
            result: SponsorshipResult,
            user_session_id: Optional[str],
    ) -> Element:
        if self._chat_wrapper is None:
            # Another adapter on the same page may already have wrapped it.
            existing = self._document.root.find_by_class(CHAT_WRAPPER_CLASS)
            if existing:
                self._chat_wrapper = existing[0]
        if self._chat_wrapper is not None:
            logger.debug("Chat area already wrapped, ignoring campaign %s", result.campaign_id)
            return self._chat_wrapper

        wrapper = self._panel(CHAT_WRAPPER_CLASS, result)
        wrapper.append_child(self._header(result))
        if container.parent is not None:
            container.replace_with(wrapper)
        else:
            self._document.body.append_child(wrapper)
        wrapper.append_child(container)
        footer = self._footer(result, user_session_id)
        if footer is not None:
            wrapper.append_child(footer)

        self._chat_wrapper = wrapper
        logger.debug("Wrapped chat area for campaign %s", result.campaign_id)
        return wrapper

    def _panel(self, class_name: str, result: SponsorshipResult) -> Element:
        panel = self._document.create_element("div")
        panel.add_class(class_name)
        if result.colour:
            panel.style["border-color"] = result.colour
        if result.campaign_id:
            panel.set_attribute("data-campaign-id", result.campaign_id)
        return panel

    def _header(self, result: SponsorshipResult) -> Element:
        header = self._document.create_element(
            "div", text=f"Sponsored by {result.brand_name or DEFAULT_BRAND_NAME}"
        )
        header.add_class(HEADER_CLASS)
        return header

    def _footer(
            self, result: SponsorshipResult, user_session_id: Optional[str]
    ) -> Optional[Element]:
        if not result.cta_link:
            return None

        link = self._document.create_element("a", text=result.cta_text or DEFAULT_CTA_TEXT)
        link.add_class(CTA_CLASS)
        link.set_attribute("href", result.cta_link)
        link.set_attribute("target", "_blank")
        link.set_attribute("rel", "noopener noreferrer")
        if result.colour:
            link.style["color"] = result.colour
        link.add_event_listener(
            "click",
            self._click_handler(result.cta_link, result.campaign_id, user_session_id),
        )

        footer = self._document.create_element("div")
        footer.add_class(FOOTER_CLASS)
        footer.append_child(link)
        return footer

    def _click_handler(
            self, url: str, campaign_id: Optional[str], user_session_id: Optional[str]
    ):
        def on_click(event: DomEvent) -> None:
            event.prevent_default()
            # Navigation never waits on tracking.
            self._document.open_window(url, "_blank")
            if campaign_id:
                self._client.track_click(
                    campaign_id=campaign_id, user_session_id=user_session_id
                )
            else:
                logger.warning("Sponsored link clicked without a campaign id, not tracked")

        return on_click


class SponsoredChat:
    """Sponsorship client that also renders sponsored turns into a document.

    Needs both a source app id and a chat container id. Speaks the versioned
    API unless told otherwise.
    """

    def __init__(
            self,
            config: Optional[ClientConfig] = None,
            *,
            document: Document,
            api_base_url: Optional[str] = None,
            source_app_id: Optional[str] = None,
            chat_container_id: Optional[str] = None,
            sponsorship_mode: Optional[str] = None,
            api_version: Optional[str] = API_VERSION_V1,
            timeout: Optional[float] = None,
            http_client: Optional[httpx.Client] = None,
            async_http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if config is None:
            config = ClientConfig.from_values(
                api_base_url=api_base_url,
                source_app_id=source_app_id,
                chat_container_id=chat_container_id,
                sponsorship_mode=sponsorship_mode,
                api_version=api_version,
                timeout=timeout,
            )
        if not config.source_app_id:
            raise ConfigurationError("source_app_id is required")
        if not config.chat_container_id:
            raise ConfigurationError("chat_container_id is required")

        self._client = SponsoredMessaging(
            config,
            http_client=http_client,
            async_http_client=async_http_client,
        )
        self._display: Optional[SponsoredDisplay] = None
        if config.sponsorship_mode is not None:
            self._display = SponsoredDisplay(
                client=self._client,
                document=document,
                chat_container_id=config.chat_container_id,
                sponsorship_mode=config.sponsorship_mode,
            )

    @property
    def client(self) -> SponsoredMessaging:
        return self._client

    @property
    def display(self) -> Optional[SponsoredDisplay]:
        return self._display

    def check_sponsorship(
            self,
            *,
            user_message: str,
            ai_response: str,
            user_session_id: Optional[str] = None,
    ) -> SponsorshipResult:
        """Check the turn and, when sponsored, draw it before returning the result."""
        result = self._client.check_sponsorship(
            user_message=user_message,
            ai_response=ai_response,
            user_session_id=user_session_id,
        )
        self._render(result, user_session_id)
        return result

    async def check_sponsorship_async(
            self,
            *,
            user_message: str,
            ai_response: str,
            user_session_id: Optional[str] = None,
    ) -> SponsorshipResult:
        result = await self._client.check_sponsorship_async(
            user_message=user_message,
            ai_response=ai_response,
            user_session_id=user_session_id,
        )
        self._render(result, user_session_id)
        return result

    def track_click(self, *, campaign_id: str, user_session_id: Optional[str] = None) -> None:
        self._client.track_click(campaign_id=campaign_id, user_session_id=user_session_id)

    async def track_click_async(
            self, *, campaign_id: str, user_session_id: Optional[str] = None
    ) -> None:
        await self._client.track_click_async(
            campaign_id=campaign_id, user_session_id=user_session_id
        )

    def close(self) -> None:
        self._client.close()

    async def aclose(self) -> None:
        await self._client.aclose()

    def __enter__(self) -> SponsoredChat:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    async def __aenter__(self) -> SponsoredChat:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def _render(self, result: SponsorshipResult, user_session_id: Optional[str]) -> None:
        if self._display is not None and result.is_sponsored:
            self._display.render(result, user_session_id=user_session_id)
