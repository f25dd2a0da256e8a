"""Pydantic models for conversations, graphs and design artifacts."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Role(str, Enum):
    """Conversation participants."""
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """One turn of a conversation."""
    model_config = ConfigDict(frozen=True)

    role: Role = Field(..., description="'user' or 'assistant'")
    content: str


class NodeKind(str, Enum):
    """Architectural role of a graph node, using the flow renderer's type names."""
    CLIENT = "clientNode"
    SERVER = "serverNode"
    DATABASE = "databaseNode"
    LOAD_BALANCER = "loadBalancerNode"
    CACHE = "cacheNode"


class Position(BaseModel):
    """Canvas coordinates. The y axis encodes the architectural tier."""
    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0


class NodeData(BaseModel):
    """Display payload of a node."""
    model_config = ConfigDict(frozen=True)

    label: str
    description: str = ""
    tech: str = Field(default="", description="Suggested technologies")


class FlowNode(BaseModel):
    """A component in the graph."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1)
    kind: NodeKind = Field(..., alias="type")
    position: Position = Field(default_factory=Position)
    data: NodeData

    @property
    def label(self) -> str:
        return self.data.label


class FlowEdge(BaseModel):
    """A directed connection between two nodes."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    source: str
    target: str
    animated: bool = True
    label: Optional[str] = None


class Graph(BaseModel):
    """Nodes and edges of an architecture diagram.

    Node ids and edge ids are unique, and every edge endpoint names a node
    of the same graph. Model output is not trusted, so this is checked on
    construction. Both lists are required so that a reply without a graph
    is rejected instead of read as an empty one.
    """
    model_config = ConfigDict(frozen=True)

    nodes: tuple[FlowNode, ...] = Field(...)
    edges: tuple[FlowEdge, ...] = Field(...)

    @model_validator(mode="before")
    @classmethod
    def _number_unnamed_edges(cls, data: Any) -> Any:
        if not isinstance(data, dict) or not isinstance(data.get("edges"), (list, tuple)):
            return data
        taken = {
            edge["id"] for edge in data["edges"]
            if isinstance(edge, dict) and edge.get("id")
        }
        edges = []
        for index, edge in enumerate(data["edges"], start=1):
            if isinstance(edge, dict) and not edge.get("id"):
                n = index
                while f"e{n}" in taken:
                    n += 1
                taken.add(f"e{n}")
                edge = {**edge, "id": f"e{n}"}
            edges.append(edge)
        return {**data, "edges": edges}

    @model_validator(mode="after")
    def _check_integrity(self) -> "Graph":
        node_ids = set()
        for node in self.nodes:
            if node.id in node_ids:
                raise ValueError(f"duplicate node id '{node.id}'")
            node_ids.add(node.id)

        edge_ids = set()
        for edge in self.edges:
            if edge.id in edge_ids:
                raise ValueError(f"duplicate edge id '{edge.id}'")
            edge_ids.add(edge.id)
            for endpoint in (edge.source, edge.target):
                if endpoint not in node_ids:
                    raise ValueError(
                        f"edge '{edge.id}' references unknown node '{endpoint}'"
                    )
        return self

    def node_ids(self) -> set[str]:
        return {node.id for node in self.nodes}

    def get_node(self, node_id: str) -> Optional[FlowNode]:
        return next((n for n in self.nodes if n.id == node_id), None)


class DesignArtifact(BaseModel):
    """Summary, Mermaid text and graph produced by one generation request."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    summary: str
    diagram_text: str = Field(..., alias="mermaidCode")
    graph: Graph = Field(..., alias="flowData")
