"""Shared state definition for the workflow step loop."""
from typing import FrozenSet, List, NamedTuple

from typing_extensions import TypedDict


class WorkItem(NamedTuple):
    """One unit of work: deliver payload to node_id."""
    node_id: str
    payload: str


class RunState(TypedDict):
    """State schema for a single workflow run."""
    queue: List[WorkItem]
    processed: FrozenSet[WorkItem]
    executed: int
