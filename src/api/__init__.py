"""API: camada de borda do canal WhatsApp e da administração.

Subpastas:
- connectors/: adapters HTTP da Graph API e do webhook
- normalizers/: envelope do webhook -> modelos internos
- payload_builders/: construção de payloads de envio
- routes/: endpoints HTTP (webhook, health, admin)

NÃO PODE conter: execução de fluxos, regras de quota, persistência.
"""
