"""Graph execution engine for visual AI-agent workflows."""
from agent_canvas.client import AgentClient
from agent_canvas.engine import WorkflowEngine
from agent_canvas.errors import (
    GraphError,
    InvocationError,
    NoTriggerError,
    StepLimitExceeded,
    WorkflowError,
)
from agent_canvas.model import (
    AgentConfig,
    Edge,
    Graph,
    Node,
    NodeKind,
    OutputConfig,
    SearchConfig,
    TriggerConfig,
    demo_graph,
)
from agent_canvas.status import NodeState, NodeStatus

__all__ = [
    "AgentClient",
    "AgentConfig",
    "Edge",
    "Graph",
    "GraphError",
    "InvocationError",
    "NoTriggerError",
    "Node",
    "NodeKind",
    "NodeState",
    "NodeStatus",
    "OutputConfig",
    "SearchConfig",
    "StepLimitExceeded",
    "TriggerConfig",
    "WorkflowEngine",
    "WorkflowError",
    "demo_graph",
]
