"""Per-kind node behaviour.

Each handler takes the node, the payload delivered to it and the agent
client, and returns the node's output text. ``execute_node`` wraps the
handler so a failing node becomes a ``NodeResult`` instead of an
exception crossing the traversal loop.
"""
from dataclasses import dataclass
from typing import Optional

from agent_canvas.errors import InvocationError
from agent_canvas.logger import get_logger
from agent_canvas.model import Node, NodeKind

log = get_logger("nodes")


@dataclass(frozen=True)
class NodeResult:
    output: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, output: str) -> "NodeResult":
        return cls(output=output)

    @classmethod
    def failure(cls, message: str) -> "NodeResult":
        return cls(error=message)


def _run_trigger(node, payload, client):
    # Always the origin, so the queued payload is ignored
    return node.config.initial_prompt or ""


def _run_agent(node, payload, client):
    return client.invoke(payload, node.config)


def _run_search(node, payload, client):
    return client.search(payload)


def _run_output(node, payload, client):
    return payload


HANDLERS = {
    NodeKind.TRIGGER: _run_trigger,
    NodeKind.AGENT: _run_agent,
    NodeKind.SEARCH: _run_search,
    NodeKind.OUTPUT: _run_output,
}


def execute_node(node: Node, payload: str, client) -> NodeResult:
    """Run node's behaviour on payload. Any exception fails the node, not the run."""
    handler = HANDLERS[node.kind]
    try:
        output = handler(node, payload, client)
    except InvocationError as e:
        log.error(f"Error in node {node.id}: {e.message}", extra={"node": node.kind.value})
        return NodeResult.failure(e.message)
    except Exception as e:
        log.exception(f"Unexpected error in node {node.id}", extra={"node": node.kind.value})
        return NodeResult.failure(str(e) or type(e).__name__)
    return NodeResult.success(output)
