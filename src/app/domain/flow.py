"""Modelos de domínio de fluxos de conversa.

Um Flow é um grafo dirigido de nós (passos) ligados por arestas. O formato
persistido é o mesmo do editor visual: cada nó traz ``type``, ``position``
e um bloco ``data`` cujo formato depende do tipo. Chaves camelCase do JSON
(``fileUrl``, ``nextNodeId``...) são aceitas por alias.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

NodeType = Literal[
    "text", "image", "pdf", "video", "template", "buttons", "condition", "webhook"
]

# Rótulos de aresta que representam o ramo verdadeiro de um nó condition.
TRUE_EDGE_LABELS: frozenset[str] = frozenset({"true", "yes"})


def _utcnow() -> datetime:
    return datetime.now(UTC)


class _FlowModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Position(_FlowModel):
    x: float = 0.0
    y: float = 0.0


class ButtonOption(_FlowModel):
    """Botão de resposta rápida de um nó buttons."""

    id: str = ""
    text: str = ""
    value: str | None = None
    next_node_id: str | None = Field(default=None, alias="nextNodeId")


class NodeData(_FlowModel):
    """Campos comuns a todos os tipos de nó."""

    label: str = ""
    content: str | None = None
    variables: dict[str, Any] = Field(default_factory=dict)
    next_node_id: str | None = Field(default=None, alias="nextNodeId")


class ButtonsData(NodeData):
    buttons: list[ButtonOption] = Field(default_factory=list)


class ConditionData(NodeData):
    condition: str | None = None


class MediaData(NodeData):
    file_url: str | None = Field(default=None, alias="fileUrl")


class TemplateData(NodeData):
    template_id: str | None = Field(default=None, alias="templateId")


class WebhookData(NodeData):
    webhook_url: str | None = Field(default=None, alias="webhookUrl")


class _BaseNode(_FlowModel):
    id: str
    position: Position = Field(default_factory=Position)


class TextNode(_BaseNode):
    type: Literal["text"] = "text"
    data: NodeData = Field(default_factory=NodeData)


class ImageNode(_BaseNode):
    type: Literal["image"] = "image"
    data: MediaData = Field(default_factory=MediaData)


class PdfNode(_BaseNode):
    type: Literal["pdf"] = "pdf"
    data: MediaData = Field(default_factory=MediaData)


class VideoNode(_BaseNode):
    type: Literal["video"] = "video"
    data: MediaData = Field(default_factory=MediaData)


class TemplateNode(_BaseNode):
    type: Literal["template"] = "template"
    data: TemplateData = Field(default_factory=TemplateData)


class ButtonsNode(_BaseNode):
    type: Literal["buttons"] = "buttons"
    data: ButtonsData = Field(default_factory=ButtonsData)


class ConditionNode(_BaseNode):
    type: Literal["condition"] = "condition"
    data: ConditionData = Field(default_factory=ConditionData)


class WebhookNode(_BaseNode):
    type: Literal["webhook"] = "webhook"
    data: WebhookData = Field(default_factory=WebhookData)


FlowNode = Annotated[
    TextNode
    | ImageNode
    | PdfNode
    | VideoNode
    | TemplateNode
    | ButtonsNode
    | ConditionNode
    | WebhookNode,
    Field(discriminator="type"),
]


class FlowEdge(_FlowModel):
    id: str
    source: str
    target: str
    label: str | None = None
    condition: str | None = None


class Flow(_FlowModel):
    """Fluxo de conversa publicado pela paróquia."""

    id: str
    name: str = ""
    description: str = ""
    nodes: list[FlowNode] = Field(default_factory=list)
    edges: list[FlowEdge] = Field(default_factory=list)
    is_active: bool = False
    trigger_keywords: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    def get_node(self, node_id: str | None) -> FlowNode | None:
        if not node_id:
            return None
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def first_node(self) -> FlowNode | None:
        return self.nodes[0] if self.nodes else None

    def outgoing_edges(self, node_id: str) -> list[FlowEdge]:
        """Arestas que saem de node_id, na ordem em que foram criadas."""
        return [edge for edge in self.edges if edge.source == node_id]

    def matches_keyword(self, text: str) -> bool:
        """True se alguma palavra-chave aparece no texto (case-insensitive)."""
        lowered = text.lower()
        return any(
            keyword and keyword.lower() in lowered
            for keyword in self.trigger_keywords
        )

    def validation_errors(self) -> list[str]:
        """Verifica ids de nós únicos e arestas apontando para nós existentes."""
        errors: list[str] = []
        seen: set[str] = set()
        for node in self.nodes:
            if node.id in seen:
                errors.append(f"node id duplicado: {node.id}")
            seen.add(node.id)

        for edge in self.edges:
            if edge.source not in seen:
                errors.append(f"edge {edge.id}: source inexistente {edge.source}")
            if edge.target not in seen:
                errors.append(f"edge {edge.id}: target inexistente {edge.target}")
        return errors

    def to_record(self) -> dict[str, Any]:
        """Serializa no formato persistido (aliases camelCase, datas ISO)."""
        return self.model_dump(mode="json", by_alias=True)
