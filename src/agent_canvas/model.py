"""Graph model for agent workflows.

A workflow is a set of nodes keyed by id plus an ordered list of directed
edges. Each node carries exactly one config dataclass; the config type
decides the node kind, so a node only ever has the fields its kind uses.

Execution state (status, output, error) is not stored here. The engine
keeps it in its own table (see status.py).
"""
import dataclasses
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, List, Optional, Union

from agent_canvas.config import DEFAULT_MODEL
from agent_canvas.errors import GraphError


class NodeKind(str, Enum):
    TRIGGER = "trigger"
    AGENT = "agent"
    SEARCH = "search"
    OUTPUT = "output"


# Display labels used when a node is created without one
NODE_LABELS = {
    NodeKind.TRIGGER: "Start Trigger",
    NodeKind.AGENT: "Gemini Agent",
    NodeKind.SEARCH: "Google Search",
    NodeKind.OUTPUT: "Output Viewer",
}


@dataclass(frozen=True)
class TriggerConfig:
    kind: ClassVar[NodeKind] = NodeKind.TRIGGER
    initial_prompt: str = ""


@dataclass(frozen=True)
class AgentConfig:
    kind: ClassVar[NodeKind] = NodeKind.AGENT
    model: str = DEFAULT_MODEL
    system_instruction: Optional[str] = None
    temperature: Optional[float] = None
    use_search: bool = False


@dataclass(frozen=True)
class SearchConfig:
    kind: ClassVar[NodeKind] = NodeKind.SEARCH


@dataclass(frozen=True)
class OutputConfig:
    kind: ClassVar[NodeKind] = NodeKind.OUTPUT


NodeConfig = Union[TriggerConfig, AgentConfig, SearchConfig, OutputConfig]

CONFIG_TYPES = {
    NodeKind.TRIGGER: TriggerConfig,
    NodeKind.AGENT: AgentConfig,
    NodeKind.SEARCH: SearchConfig,
    NodeKind.OUTPUT: OutputConfig,
}


@dataclass(frozen=True)
class Node:
    """A single pipeline step. x/y are canvas coordinates, unused by the engine."""
    id: str
    config: NodeConfig
    label: str = ""
    x: float = 0.0
    y: float = 0.0

    @property
    def kind(self) -> NodeKind:
        return self.config.kind


@dataclass(frozen=True)
class Edge:
    source: str
    target: str
    id: str = field(default_factory=lambda: f"e-{uuid.uuid4().hex[:12]}")


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


class Graph:
    """Mutable container edited by the canvas and read by the engine.

    Nodes are replaced whole on every edit, so a reader never sees a
    half-updated node.
    """

    def __init__(self, nodes: List[Node] = None, edges: List[Edge] = None):
        self._nodes: Dict[str, Node] = {}
        self._edges: List[Edge] = []
        for node in nodes or []:
            self.add_node(node)
        for edge in edges or []:
            self.connect(edge.source, edge.target, edge_id=edge.id)

    # ---- reads ----

    @property
    def nodes(self) -> List[Node]:
        return list(self._nodes.values())

    @property
    def edges(self) -> List[Edge]:
        return list(self._edges)

    def node_ids(self) -> List[str]:
        return list(self._nodes)

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def outgoing(self, node_id: str) -> List[Edge]:
        """Edges leaving node_id, in the order they were created."""
        return [e for e in self._edges if e.source == node_id]

    def find_trigger(self) -> Optional[Node]:
        """First Trigger node in insertion order, or None."""
        for node in self._nodes.values():
            if node.kind is NodeKind.TRIGGER:
                return node
        return None

    def triggers(self) -> List[Node]:
        return [n for n in self._nodes.values() if n.kind is NodeKind.TRIGGER]

    # ---- edits ----

    def add_node(self, node: Node) -> Node:
        if node.id in self._nodes:
            raise GraphError(f"Node id already in use: {node.id}")
        self._nodes[node.id] = node
        return node

    def create_node(self, kind: NodeKind, label: str = None, x: float = 0.0,
                    y: float = 0.0, node_id: str = None, **config) -> Node:
        """Add a node of the given kind with that kind's default settings."""
        kind = NodeKind(kind)
        if kind is NodeKind.TRIGGER:
            config.setdefault("initial_prompt", "Write a poem about coding.")
        node = Node(
            id=node_id or _new_id(),
            config=CONFIG_TYPES[kind](**config),
            label=label or NODE_LABELS[kind],
            x=x,
            y=y,
        )
        return self.add_node(node)

    def remove_node(self, node_id: str) -> None:
        """Delete a node and every edge touching it."""
        if self._nodes.pop(node_id, None) is None:
            raise GraphError(f"Unknown node: {node_id}")
        self._edges = [e for e in self._edges if e.source != node_id and e.target != node_id]

    def update_config(self, node_id: str, **changes) -> Node:
        node = self._require(node_id)
        updated = dataclasses.replace(node, config=dataclasses.replace(node.config, **changes))
        self._nodes[node_id] = updated
        return updated

    def move_node(self, node_id: str, x: float, y: float) -> Node:
        updated = dataclasses.replace(self._require(node_id), x=x, y=y)
        self._nodes[node_id] = updated
        return updated

    def connect(self, source: str, target: str, edge_id: str = None) -> Edge:
        """Add source -> target. Returns the existing edge if the pair is already wired."""
        if source == target:
            raise GraphError(f"Self-loop on node {source} is not allowed")
        self._require(source)
        self._require(target)
        for edge in self._edges:
            if edge.source == source and edge.target == target:
                return edge
        edge = Edge(source=source, target=target, id=edge_id) if edge_id else Edge(source=source, target=target)
        self._edges.append(edge)
        return edge

    def disconnect(self, edge_id: str) -> None:
        remaining = [e for e in self._edges if e.id != edge_id]
        if len(remaining) == len(self._edges):
            raise GraphError(f"Unknown edge: {edge_id}")
        self._edges = remaining

    def _require(self, node_id: str) -> Node:
        node = self._nodes.get(node_id)
        if node is None:
            raise GraphError(f"Unknown node: {node_id}")
        return node


def demo_graph() -> Graph:
    """Starter workflow: trigger -> agent -> output."""
    graph = Graph()
    graph.create_node(NodeKind.TRIGGER, node_id="1", x=100, y=300,
                      initial_prompt="Who is the CEO of Google?")
    graph.create_node(NodeKind.AGENT, node_id="2", x=500, y=300,
                      system_instruction="You are a concise assistant.")
    graph.create_node(NodeKind.OUTPUT, label="Final Output", node_id="3", x=900, y=300)
    graph.connect("1", "2", edge_id="e1-2")
    graph.connect("2", "3", edge_id="e2-3")
    return graph
