"""Executor de fluxos: da mensagem recebida à resposta e novo estado.

Para cada mensagem recebida:

1. Carrega o contato e tenta retomar a posição gravada (fluxo + nó).
   Sem posição válida seleciona um fluxo: o primeiro ativo cuja
   palavra-chave aparece no texto, senão o primeiro ativo.
2. Um contato parado num nó buttons (estado ``waiting``) tem a resposta
   usada para escolher a aresta; o alvo executa na mesma passada.
3. Executa o nó: text/buttons/image enviam; condition avalia e, se
   verdadeira, segue a aresta true/yes (até ``max_condition_hops``).
4. Grava a posição: buttons fica parado em ``waiting``; demais nós
   avançam para o próximo nó ou, sem aresta de saída, ficam onde estão
   com estado ``completed`` e a próxima mensagem executa o mesmo nó.

Execuções do mesmo telefone são serializadas por um asyncio.Lock dentro
do processo. Cada chamada externa falha isoladamente: envio com erro não
impede o avanço.
"""

from __future__ import annotations

import asyncio
import logging
import weakref
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from app.domain.flow import TRUE_EDGE_LABELS, ButtonsNode, ConditionNode, ImageNode, TextNode
from app.protocols.models import OutboundMessageRequest, ReplyButton
from app.services.condition_evaluator import KeywordConditionEvaluator
from config.logging import mask_phone
from config.settings.flow import FlowSettings
from utils.errors import PersistenceError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from app.domain.contact import Contact, ConversationState
    from app.domain.flow import ButtonOption, Flow, FlowNode
    from app.protocols.condition_evaluator import ConditionEvaluatorProtocol
    from app.protocols.models import InboundMessage
    from app.protocols.stores import ContactStoreProtocol, FlowStoreProtocol
    from app.services.messaging import OutboundMessenger

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FlowExecutionResult:
    """Resumo de uma execução (usado em logs e testes)."""

    flow_id: str | None = None
    executed_nodes: list[str] = field(default_factory=list)
    sent_messages: int = 0
    position: str | None = None
    conversation_state: ConversationState | None = None
    skipped_reason: str | None = None


def select_flow(flows: Sequence[Flow], content: str) -> Flow | None:
    """Primeiro fluxo ativo com palavra-chave no texto, senão o primeiro ativo."""
    active = [flow for flow in flows if flow.is_active]
    for flow in active:
        if flow.matches_keyword(content):
            return flow
    return active[0] if active else None


def match_button(
    buttons: Sequence[ButtonOption],
    content: str,
    reply_id: str | None = None,
) -> ButtonOption | None:
    """Botão escolhido pela resposta.

    Em ordem de prioridade, cada regra varrendo todos os botões: id do
    reply interativo, texto do botão contido na resposta (case-insensitive)
    e igualdade exata com ``value``.
    """
    if reply_id:
        for button in buttons:
            if button.id and button.id == reply_id:
                return button
    lowered = content.lower()
    for button in buttons:
        if button.text and button.text.lower() in lowered:
            return button
    for button in buttons:
        if button.value is not None and content == button.value:
            return button
    return None


def find_next_node(
    flow: Flow,
    node: FlowNode,
    content: str,
    reply_id: str | None = None,
) -> FlowNode | None:
    """Próximo nó a partir das arestas de saída de ``node``.

    Para buttons prefere a aresta cujo rótulo é o texto do botão escolhido.
    Senão, a primeira aresta de saída na ordem em que foi criada.
    """
    edges = flow.outgoing_edges(node.id)

    if isinstance(node, ButtonsNode):
        chosen = match_button(node.data.buttons, content, reply_id)
        if chosen is not None:
            for edge in edges:
                if edge.label == chosen.text:
                    return flow.get_node(edge.target)
            if chosen.next_node_id and flow.get_node(chosen.next_node_id):
                return flow.get_node(chosen.next_node_id)

    if not edges:
        return None
    return flow.get_node(edges[0].target)


def find_condition_target(flow: Flow, node: ConditionNode) -> FlowNode | None:
    for edge in flow.outgoing_edges(node.id):
        if edge.label and edge.label.strip().lower() in TRUE_EDGE_LABELS:
            return flow.get_node(edge.target)
    return None


class FlowExecutor:
    """Executa fluxos para mensagens recebidas."""

    def __init__(
        self,
        *,
        flow_store: FlowStoreProtocol,
        contact_store: ContactStoreProtocol,
        messenger: OutboundMessenger,
        condition_evaluator: ConditionEvaluatorProtocol | None = None,
        settings: FlowSettings | None = None,
    ) -> None:
        self._flows = flow_store
        self._contacts = contact_store
        self._messenger = messenger
        self._evaluator = condition_evaluator or KeywordConditionEvaluator()
        self._settings = settings or FlowSettings()
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def _lock_for(self, phone: str) -> asyncio.Lock:
        lock = self._locks.get(phone)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[phone] = lock
        return lock

    async def execute(self, inbound: InboundMessage) -> FlowExecutionResult:
        lock = self._lock_for(inbound.from_number)
        async with lock:
            return await self._execute_locked(inbound)

    async def _execute_locked(self, inbound: InboundMessage) -> FlowExecutionResult:
        result = FlowExecutionResult()
        contact = await self._load_contact(inbound.from_number)

        resumed = await self._resume_position(contact)
        if resumed is not None:
            flow, node = resumed
            if (
                contact is not None
                and contact.conversation_state == "waiting"
                and isinstance(node, ButtonsNode)
            ):
                target = find_next_node(flow, node, inbound.content, inbound.reply_id)
                result.flow_id = flow.id
                if target is None:
                    await self._save_position(inbound.from_number, flow, node, "completed", result)
                    return result
                node = target
        else:
            flow = await self._select_flow(inbound.content)
            if flow is None:
                result.skipped_reason = "no_active_flow"
                logger.info("flow_no_active_flow", extra={"to": mask_phone(inbound.from_number)})
                return result
            first = flow.first_node()
            if first is None:
                result.skipped_reason = "flow_without_nodes"
                logger.info("flow_without_nodes", extra={"flow_id": flow.id})
                return result
            node = first

        result.flow_id = flow.id
        await self._run_from(flow, node, inbound, result)
        logger.info(
            "flow_executed",
            extra={
                "flow_id": flow.id,
                "executed_nodes": result.executed_nodes,
                "position": result.position,
                "conversation_state": result.conversation_state,
                "sent_messages": result.sent_messages,
            },
        )
        return result

    async def _run_from(
        self,
        flow: Flow,
        node: FlowNode,
        inbound: InboundMessage,
        result: FlowExecutionResult,
    ) -> None:
        hops = 0
        current = node
        while isinstance(current, ConditionNode):
            hops += 1
            if hops > self._settings.max_condition_hops:
                logger.warning(
                    "flow_condition_hops_exceeded",
                    extra={"flow_id": flow.id, "node_id": current.id, "hops": hops},
                )
                return
            result.executed_nodes.append(current.id)
            if not self._evaluator.evaluate(current.data.condition, inbound.content):
                return
            target = find_condition_target(flow, current)
            if target is None:
                return
            current = target

        result.executed_nodes.append(current.id)
        await self._execute_node(flow, current, inbound.from_number, result)

        if isinstance(current, ButtonsNode):
            await self._save_position(inbound.from_number, flow, current, "waiting", result)
            return

        next_node = find_next_node(flow, current, inbound.content, inbound.reply_id)
        if next_node is None:
            await self._save_position(inbound.from_number, flow, current, "completed", result)
            return
        await self._save_position(inbound.from_number, flow, next_node, "active", result)

    async def _execute_node(
        self,
        flow: Flow,
        node: FlowNode,
        phone: str,
        result: FlowExecutionResult,
    ) -> None:
        request = self._build_request(flow, node, phone)
        if request is None:
            logger.debug("flow_node_noop", extra={"node_id": node.id, "node_type": node.type})
            return
        response = await self._messenger.send(request)
        if response.success:
            result.sent_messages += 1

    def _build_request(
        self,
        flow: Flow,
        node: FlowNode,
        phone: str,
    ) -> OutboundMessageRequest | None:
        if isinstance(node, TextNode):
            return OutboundMessageRequest(
                to=phone,
                kind="text",
                text=node.data.content or self._settings.default_text,
                flow_id=flow.id,
                node_id=node.id,
            )
        if isinstance(node, ButtonsNode):
            buttons = tuple(
                ReplyButton(id=button.id or f"btn_{index}", title=button.text)
                for index, button in enumerate(node.data.buttons)
            )
            return OutboundMessageRequest(
                to=phone,
                kind="buttons",
                text=node.data.content or self._settings.default_buttons_text,
                buttons=buttons,
                flow_id=flow.id,
                node_id=node.id,
            )
        if isinstance(node, ImageNode) and node.data.file_url:
            return OutboundMessageRequest(
                to=phone,
                kind="image",
                text=node.data.content or "",
                media_url=node.data.file_url,
                flow_id=flow.id,
                node_id=node.id,
            )
        return None

    async def _load_contact(self, phone: str) -> Contact | None:
        try:
            return await self._contacts.get(phone)
        except PersistenceError as exc:
            logger.warning(
                "flow_contact_fetch_failed",
                extra={"to": mask_phone(phone), "error": str(exc)},
            )
            return None

    async def _resume_position(
        self,
        contact: Contact | None,
    ) -> tuple[Flow, FlowNode] | None:
        if contact is None or not contact.has_position:
            return None
        try:
            flow = await self._flows.get(contact.current_flow or "")
        except PersistenceError as exc:
            logger.warning("flow_fetch_failed", extra={"error": str(exc)})
            return None
        if flow is None or not flow.is_active:
            return None
        node = flow.get_node(contact.current_node)
        if node is None:
            return None
        return flow, node

    async def _select_flow(self, content: str) -> Flow | None:
        try:
            flows = await self._flows.list_active()
        except PersistenceError as exc:
            logger.warning("flow_list_failed", extra={"error": str(exc)})
            return None
        return select_flow(flows, content)

    async def _save_position(
        self,
        phone: str,
        flow: Flow,
        node: FlowNode,
        state: ConversationState,
        result: FlowExecutionResult,
    ) -> None:
        result.position = node.id
        result.conversation_state = state
        try:
            await self._contacts.update(
                phone,
                {
                    "current_flow": flow.id,
                    "current_node": node.id,
                    "conversation_state": state,
                    "last_interaction": datetime.now(UTC),
                },
            )
        except PersistenceError as exc:
            logger.warning(
                "flow_position_write_failed",
                extra={"to": mask_phone(phone), "node_id": node.id, "error": str(exc)},
            )
