"""Endpoints de webhook do WhatsApp.

Endpoints:
- GET /webhook/whatsapp: verificação de webhook (Meta challenge)
- POST /webhook/whatsapp: eventos (mensagens recebidas e status)

Fluxo do POST:
1. Valida assinatura (quando WHATSAPP_APP_SECRET configurado) e JSON
2. Extrai mensagens e status do envelope
3. Processa inline: dedupe, quota, registro, contato, executor de fluxos
4. Responde {"status": "ok"}

Qualquer falha inesperada vira 500 {"error": "Internal server error"} e um
registro de erro em webhook_logs. Toda chamada é registrada (best-effort).
"""

from __future__ import annotations

import logging
import time
from typing import Any

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse

from api.connectors.whatsapp.webhook.receive import (
    InvalidJsonError,
    InvalidSignatureError,
    parse_webhook_request,
)
from api.connectors.whatsapp.webhook.verify import (
    InvalidVerificationRequestError,
    VerifyTokenMismatchError,
    verify_webhook_challenge,
)
from api.normalizers.whatsapp import extract_payload_messages, extract_payload_statuses
from app.bootstrap import get_container
from app.observability import (
    get_correlation_id,
    record_latency,
    reset_correlation_id,
    set_correlation_id,
)
from config.settings import get_whatsapp_settings

logger = logging.getLogger(__name__)

router = APIRouter()

OK_BODY: dict[str, str] = {"status": "ok"}
ERROR_BODY: dict[str, str] = {"error": "Internal server error"}


def _request_url(request: Request) -> str:
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


@router.get("")
async def verify_webhook(request: Request) -> Response:
    """Verificação de webhook: ecoa hub.challenge quando o token confere.

    Returns:
        200 com o challenge, 403 para token divergente, 400 para modo inválido.
    """
    settings = get_whatsapp_settings()

    hub_mode = request.query_params.get("hub.mode")
    hub_verify_token = request.query_params.get("hub.verify_token")
    hub_challenge = request.query_params.get("hub.challenge")

    try:
        challenge = verify_webhook_challenge(
            hub_mode=hub_mode,
            hub_verify_token=hub_verify_token,
            hub_challenge=hub_challenge,
            expected_token=settings.verify_token,
        )
        logger.info("webhook_verified", extra={"channel": "whatsapp"})
        response = Response(
            content=challenge,
            media_type="text/plain",
            status_code=status.HTTP_200_OK,
        )
    except VerifyTokenMismatchError:
        logger.warning(
            "webhook_verification_failed",
            extra={"channel": "whatsapp", "reason": "verify_token_mismatch"},
        )
        response = Response(
            content="Forbidden",
            media_type="text/plain",
            status_code=status.HTTP_403_FORBIDDEN,
        )
    except InvalidVerificationRequestError:
        logger.warning(
            "webhook_verification_failed",
            extra={"channel": "whatsapp", "reason": "invalid_mode", "hub_mode": hub_mode},
        )
        response = Response(
            content="Invalid verification request",
            media_type="text/plain",
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    await get_container().webhook_logger.record_call(
        method="GET",
        url=_request_url(request),
        headers=dict(request.headers),
        body=None,
        status_code=response.status_code,
    )
    return response


@router.post("", response_model=None)
async def receive_webhook(request: Request) -> Response | dict[str, Any]:
    """Recebimento de eventos do WhatsApp, processados antes da resposta.

    Returns:
        {"status": "ok"}, 401 para assinatura inválida ou 500 em erro.
    """
    token = set_correlation_id(request.headers.get("x-correlation-id"))
    started_at = time.perf_counter()
    container = get_container()
    url = _request_url(request)
    headers = dict(request.headers)
    payload: dict[str, Any] | None = None

    try:
        settings = get_whatsapp_settings()
        raw_body = await request.body()

        try:
            payload, signature_result = parse_webhook_request(
                raw_body=raw_body,
                headers=headers,
                secret=settings.app_secret or None,
            )
        except InvalidSignatureError as exc:
            logger.warning(
                "webhook_signature_invalid",
                extra={"channel": "whatsapp", "error": str(exc)},
            )
            await container.webhook_logger.record_call(
                method="POST",
                url=url,
                headers=headers,
                body=None,
                status_code=status.HTTP_401_UNAUTHORIZED,
            )
            return Response(
                content="Unauthorized",
                media_type="text/plain",
                status_code=status.HTTP_401_UNAUTHORIZED,
            )

        messages = extract_payload_messages(payload)
        statuses = extract_payload_statuses(payload)
        logger.info(
            "webhook_received",
            extra={
                "channel": "whatsapp",
                "signature_skipped": signature_result.skipped,
                "payload_size": len(raw_body),
                "message_count": len(messages),
                "status_count": len(statuses),
            },
        )

        summary = await container.process_webhook.execute(messages, statuses)
        logger.info(
            "webhook_processed",
            extra={
                "channel": "whatsapp",
                "processed": summary.processed,
                "skipped_duplicates": summary.skipped_duplicates,
                "statuses": summary.statuses,
            },
        )
        await container.webhook_logger.record_call(
            method="POST",
            url=url,
            headers=headers,
            body=payload,
            response=OK_BODY,
            status_code=status.HTTP_200_OK,
        )
        return dict(OK_BODY)

    except Exception as exc:
        reason = "invalid_json" if isinstance(exc, InvalidJsonError) else type(exc).__name__
        logger.exception(
            "webhook_processing_failed",
            extra={"channel": "whatsapp", "error_type": reason},
        )
        await container.webhook_logger.record_error(
            str(exc) or reason,
            method="POST",
            url=url,
        )
        return JSONResponse(
            content=ERROR_BODY,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    finally:
        record_latency(
            "webhook",
            "receive",
            (time.perf_counter() - started_at) * 1000,
            get_correlation_id(),
        )
        reset_correlation_id(token)
