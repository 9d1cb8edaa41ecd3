"""Helpers de extração do conteúdo útil de cada tipo de mensagem.

O executor de fluxos só precisa de texto: corpo de text, texto de button
(resposta a template), título de reply interativo ou legenda de mídia.
"""

from __future__ import annotations

from typing import Any


def extract_text_body(msg: dict[str, Any]) -> str | None:
    text_block = msg.get("text")
    if isinstance(text_block, dict):
        body = text_block.get("body")
        return body if isinstance(body, str) else None
    return None


def extract_button_text(msg: dict[str, Any]) -> tuple[str | None, str | None]:
    """Botão de template: (text, payload)."""
    button_block = msg.get("button")
    if not isinstance(button_block, dict):
        return None, None
    return button_block.get("text"), button_block.get("payload")


def extract_interactive_reply(msg: dict[str, Any]) -> tuple[str | None, str | None]:
    """button_reply ou list_reply: (title, id)."""
    interactive_block = msg.get("interactive")
    if not isinstance(interactive_block, dict):
        return None, None
    for reply_key in ("button_reply", "list_reply"):
        reply = interactive_block.get(reply_key)
        if isinstance(reply, dict) and (reply.get("title") or reply.get("id")):
            return reply.get("title"), reply.get("id")
    return None, None


_CAPTIONED_MEDIA = ("image", "video", "document")


def extract_media_caption(msg: dict[str, Any]) -> str | None:
    for media_key in _CAPTIONED_MEDIA:
        media_block = msg.get(media_key)
        if isinstance(media_block, dict):
            caption = media_block.get("caption")
            return caption if isinstance(caption, str) else None
    return None


def extract_message_content(msg: dict[str, Any]) -> tuple[str, str | None]:
    """Retorna (conteúdo textual, id do reply quando houver).

    Ordem: text.body, button.text, interactive reply title, legenda de
    mídia. "" se nada.
    """
    body = extract_text_body(msg)
    if body:
        return body, None

    button_text, button_payload = extract_button_text(msg)
    if button_text:
        return button_text, button_payload

    reply_title, reply_id = extract_interactive_reply(msg)
    if reply_title:
        return reply_title, reply_id

    caption = extract_media_caption(msg)
    if caption:
        return caption, None
    return "", reply_id
