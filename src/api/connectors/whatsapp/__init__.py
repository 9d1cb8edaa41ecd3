"""Conector WhatsApp: adapter de borda para a Graph API.

Único ponto de IO com a Meta:
- Webhook (verify, receive, signature)
- HTTP client para envio de mensagens
- Parsing de erros da Graph API
"""

from .http_client import WhatsAppHttpClient, create_whatsapp_http_client
from .meta_errors import WhatsAppApiError, is_permanent_error, parse_meta_error
from .signature import SignatureResult, verify_meta_signature

__all__ = [
    "SignatureResult",
    "WhatsAppApiError",
    "WhatsAppHttpClient",
    "create_whatsapp_http_client",
    "is_permanent_error",
    "parse_meta_error",
    "verify_meta_signature",
]
