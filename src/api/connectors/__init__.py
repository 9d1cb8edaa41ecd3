"""Connectors: adapters de borda para APIs externas.

- whatsapp/: Cloud API (envio) e webhook (verify, receive, signature)
"""

__all__: list[str] = []
