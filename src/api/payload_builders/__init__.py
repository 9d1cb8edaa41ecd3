"""Payload builders: construção de payloads para APIs externas.

Estrutura:
- whatsapp/: Cloud API (text, interactive button, image)
"""

__all__: list[str] = []
