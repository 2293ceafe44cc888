#!/usr/bin/env python3
"""Example wiring the sponsorship client into a toy chat turn."""

import logging

from sponsoredmessaging import Document, Element, SponsoredChat, SponsoredMessaging

API_BASE_URL = "http://localhost:3000/"

logging.basicConfig(level=logging.DEBUG)


def plain_client():
    print("=== Plain client ===")

    with SponsoredMessaging(api_base_url=API_BASE_URL, source_app_id="demo-app") as client:
        result = client.check_sponsorship(
            user_message="Any tips for a good morning routine?",
            ai_response="Start with a glass of water and some light stretching.",
            user_session_id="user_session_123",
        )

        if result.is_sponsored:
            print(f"Sponsored by {result.brand_name}: {result.raw_content}")
            if result.campaign_id:
                client.track_click(campaign_id=result.campaign_id, user_session_id="user_session_123")
        else:
            print(f"Not sponsored: {result.raw_content}")


def rendered_chat():
    print("=== Rendered chat ===")

    document = Document(opener=lambda url, target: print(f"Would open {url} in {target}"))
    chat_area = Element("div")
    chat_area.id = "chat-messages"
    document.body.append_child(chat_area)

    with SponsoredChat(
        document=document,
        api_base_url=API_BASE_URL,
        source_app_id="demo-app",
        chat_container_id="chat-messages",
        sponsorship_mode="message",
    ) as chat:
        chat.check_sponsorship(
            user_message="Which coffee should I buy?",
            ai_response="A medium roast is a good all-rounder.",
            user_session_id="user_session_123",
        )

    print(document.to_html())


if __name__ == "__main__":
    plain_client()
    rendered_chat()
