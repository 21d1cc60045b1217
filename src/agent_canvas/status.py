"""Per-node execution status as seen by the presentation layer.

The engine emits events; ``project`` folds an event into a node's current
``NodeState``. ``ExecutionStateTable`` is the engine-owned store of those
states, keyed by node id.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Union


class NodeStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class NodeState:
    status: NodeStatus = NodeStatus.IDLE
    output: Optional[str] = None
    error_message: Optional[str] = None


IDLE = NodeState()


@dataclass(frozen=True)
class NodeReset:
    node_id: str


@dataclass(frozen=True)
class NodeStarted:
    node_id: str


@dataclass(frozen=True)
class NodeSucceeded:
    node_id: str
    output: str


@dataclass(frozen=True)
class NodeFailed:
    node_id: str
    message: str


ExecutionEvent = Union[NodeReset, NodeStarted, NodeSucceeded, NodeFailed]


def project(state: NodeState, event: ExecutionEvent) -> NodeState:
    """Return the node state that results from applying event to state."""
    if isinstance(event, NodeReset):
        return IDLE
    if isinstance(event, NodeStarted):
        if state.status is NodeStatus.RUNNING:
            raise ValueError(f"Node {event.node_id} is already running")
        # Output of an earlier firing stays visible until this one completes
        return NodeState(NodeStatus.RUNNING, output=state.output)
    if state.status is not NodeStatus.RUNNING:
        raise ValueError(
            f"Node {event.node_id} cannot finish from status '{state.status.value}'"
        )
    if isinstance(event, NodeSucceeded):
        return NodeState(NodeStatus.SUCCESS, output=event.output)
    if isinstance(event, NodeFailed):
        return NodeState(NodeStatus.ERROR, output=state.output, error_message=event.message)
    raise TypeError(f"Unknown execution event: {event!r}")


Listener = Callable[[str, NodeState], None]


class ExecutionStateTable:
    """Node id -> NodeState, written only by the engine."""

    def __init__(self):
        self._states: Dict[str, NodeState] = {}
        self._listeners: List[Listener] = []

    def get(self, node_id: str) -> NodeState:
        return self._states.get(node_id, IDLE)

    def snapshot(self) -> Dict[str, NodeState]:
        return dict(self._states)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener(node_id, state) after every update. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def apply(self, event: ExecutionEvent) -> NodeState:
        new_state = project(self.get(event.node_id), event)
        self._states[event.node_id] = new_state
        for listener in list(self._listeners):
            listener(event.node_id, new_state)
        return new_state

    def reset(self, node_ids: Iterable[str]) -> None:
        """Forget every previous state and mark node_ids Idle."""
        self._states = {}
        for node_id in node_ids:
            self.apply(NodeReset(node_id))
