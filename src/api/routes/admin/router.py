"""API administrativa do painel da paróquia.

Endpoints (todos sob /admin, protegidos por Bearer ADMIN_API_TOKEN):
- flows: listar, obter, salvar (upsert com validação do grafo), remover,
  ativar/desativar
- contacts: listar, obter, resetar posição no fluxo
- messages / logs: registros mais recentes primeiro
- quota: consultar e zerar contadores

Falhas de persistência viram 503; o painel decide se tenta de novo.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from pydantic import BaseModel, ValidationError

from api.routes.admin.auth import require_admin
from app.bootstrap import get_container
from app.domain.flow import Flow
from config.logging import mask_phone
from utils.errors import FlowValidationError, PersistenceError

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_admin)])

DEFAULT_LIST_LIMIT = 100
MAX_LIST_LIMIT = 1000


class FlowStatusUpdate(BaseModel):
    is_active: bool


def _persistence_unavailable(operation: str, exc: PersistenceError) -> HTTPException:
    logger.warning("admin_persistence_failed", extra={"operation": operation, "error": str(exc)})
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Persistence unavailable",
    )


def _not_found(resource: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{resource} not found")


def build_flow(flow_id: str, body: dict[str, Any], existing: Flow | None) -> Flow:
    """Monta o fluxo a salvar a partir do corpo recebido.

    O id da URL prevalece sobre o do corpo; created_at é preservado quando
    o fluxo já existe e updated_at é sempre carimbado agora.

    Raises:
        FlowValidationError: corpo malformado ou grafo inconsistente
    """
    try:
        flow = Flow.model_validate({**body, "id": flow_id})
    except ValidationError as exc:
        raise FlowValidationError(
            [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()]
        ) from exc

    errors = flow.validation_errors()
    if errors:
        raise FlowValidationError(errors)

    now = datetime.now(UTC)
    created_at = existing.created_at if existing is not None else now
    return flow.model_copy(update={"created_at": created_at, "updated_at": now})


# ----------------------------------------------------------------------------
# Flows
# ----------------------------------------------------------------------------


@router.get("/flows")
async def list_flows() -> list[dict[str, Any]]:
    try:
        flows = await get_container().stores.flows.list_all()
    except PersistenceError as exc:
        raise _persistence_unavailable("list_flows", exc) from exc
    return [flow.to_record() for flow in flows]


@router.get("/flows/{flow_id}")
async def get_flow(flow_id: str) -> dict[str, Any]:
    try:
        flow = await get_container().stores.flows.get(flow_id)
    except PersistenceError as exc:
        raise _persistence_unavailable("get_flow", exc) from exc
    if flow is None:
        raise _not_found("Flow")
    return flow.to_record()


@router.put("/flows/{flow_id}")
async def save_flow(flow_id: str, body: dict[str, Any] = Body(...)) -> dict[str, Any]:
    """Cria ou substitui um fluxo. Grafo inválido responde 422."""
    store = get_container().stores.flows
    try:
        existing = await store.get(flow_id)
        flow = build_flow(flow_id, body, existing)
        saved = await store.upsert(flow)
    except FlowValidationError as exc:
        logger.info("admin_flow_rejected", extra={"flow_id": flow_id, "errors": exc.errors})
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"errors": exc.errors},
        ) from exc
    except PersistenceError as exc:
        raise _persistence_unavailable("save_flow", exc) from exc

    logger.info(
        "admin_flow_saved",
        extra={"flow_id": flow_id, "nodes": len(saved.nodes), "is_active": saved.is_active},
    )
    return saved.to_record()


@router.delete("/flows/{flow_id}")
async def delete_flow(flow_id: str) -> dict[str, Any]:
    try:
        deleted = await get_container().stores.flows.delete(flow_id)
    except PersistenceError as exc:
        raise _persistence_unavailable("delete_flow", exc) from exc
    if not deleted:
        raise _not_found("Flow")
    logger.info("admin_flow_deleted", extra={"flow_id": flow_id})
    return {"deleted": True, "id": flow_id}


@router.post("/flows/{flow_id}/status")
async def set_flow_status(flow_id: str, update: FlowStatusUpdate) -> dict[str, Any]:
    store = get_container().stores.flows
    try:
        flow = await store.get(flow_id)
        if flow is None:
            raise _not_found("Flow")
        changed = flow.model_copy(
            update={"is_active": update.is_active, "updated_at": datetime.now(UTC)}
        )
        saved = await store.upsert(changed)
    except PersistenceError as exc:
        raise _persistence_unavailable("set_flow_status", exc) from exc
    logger.info("admin_flow_status", extra={"flow_id": flow_id, "is_active": update.is_active})
    return saved.to_record()


# ----------------------------------------------------------------------------
# Contacts
# ----------------------------------------------------------------------------


@router.get("/contacts")
async def list_contacts() -> list[dict[str, Any]]:
    try:
        contacts = await get_container().stores.contacts.list_all()
    except PersistenceError as exc:
        raise _persistence_unavailable("list_contacts", exc) from exc
    return [contact.to_record() for contact in contacts]


@router.get("/contacts/{phone}")
async def get_contact(phone: str) -> dict[str, Any]:
    try:
        contact = await get_container().stores.contacts.get(phone)
    except PersistenceError as exc:
        raise _persistence_unavailable("get_contact", exc) from exc
    if contact is None:
        raise _not_found("Contact")
    return contact.to_record()


@router.post("/contacts/{phone}/reset")
async def reset_contact(phone: str) -> dict[str, Any]:
    """Tira o contato do fluxo: a próxima mensagem seleciona um fluxo de novo."""
    store = get_container().stores.contacts
    try:
        contact = await store.get(phone)
        if contact is None:
            raise _not_found("Contact")
        await store.update(
            phone,
            {
                "current_flow": None,
                "current_node": None,
                "conversation_state": "active",
                "variables": {},
            },
        )
        updated = await store.get(phone)
    except PersistenceError as exc:
        raise _persistence_unavailable("reset_contact", exc) from exc
    logger.info("admin_contact_reset", extra={"to": mask_phone(phone)})
    return (updated or contact).to_record()


# ----------------------------------------------------------------------------
# Messages / logs
# ----------------------------------------------------------------------------


@router.get("/messages")
async def list_messages(
    limit: int = Query(DEFAULT_LIST_LIMIT, ge=1, le=MAX_LIST_LIMIT),
) -> list[dict[str, Any]]:
    try:
        messages = await get_container().stores.messages.list_recent(limit)
    except PersistenceError as exc:
        raise _persistence_unavailable("list_messages", exc) from exc
    return [message.to_record() for message in messages]


@router.get("/logs")
async def list_logs(
    limit: int = Query(DEFAULT_LIST_LIMIT, ge=1, le=MAX_LIST_LIMIT),
) -> list[dict[str, Any]]:
    try:
        logs = await get_container().stores.webhook_logs.list_recent(limit)
    except PersistenceError as exc:
        raise _persistence_unavailable("list_logs", exc) from exc
    return [log.to_record() for log in logs]


# ----------------------------------------------------------------------------
# Quota
# ----------------------------------------------------------------------------


@router.get("/quota")
async def get_quota() -> dict[str, Any]:
    quota = await get_container().quota_service.get_quota()
    return quota.to_record()


@router.post("/quota/reset")
async def reset_quota() -> dict[str, Any]:
    try:
        quota = await get_container().quota_service.reset()
    except PersistenceError as exc:
        raise _persistence_unavailable("reset_quota", exc) from exc
    logger.info("admin_quota_reset")
    return quota.to_record()
