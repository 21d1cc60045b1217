"""Workflow execution engine.

Runs a graph breadth-first from its Trigger node, one work item at a time:

  1. reset every node to Idle
  2. seed the queue with (trigger, initial prompt)
  3. pop (node, payload); skip it if that exact pair already ran
  4. mark Running, execute the node, mark Success or Error
  5. on Success, queue (target, output) for each outgoing edge

A node that fails ends its branch; other branches keep going. The queue
loop itself is a LangGraph graph (see graph.py).
"""
import threading
import time
from collections import deque
from typing import Dict, Optional

from langgraph.errors import GraphRecursionError

from agent_canvas.client import AgentClient
from agent_canvas.config import MAX_STEPS, PACING_DELAY
from agent_canvas.errors import NoTriggerError, StepLimitExceeded
from agent_canvas.graph import build_graph
from agent_canvas.logger import get_logger, log_summary, log_time, start_run, track
from agent_canvas.model import Graph
from agent_canvas.nodes import execute_node
from agent_canvas.state import RunState, WorkItem
from agent_canvas.status import (
    ExecutionStateTable,
    NodeFailed,
    NodeStarted,
    NodeState,
    NodeStatus,
    NodeSucceeded,
)

log = get_logger("engine")


class WorkflowEngine:
    """Executes a Graph and owns the per-node execution state."""

    def __init__(self, graph: Graph, client=None, pacing_delay: float = PACING_DELAY,
                 max_steps: int = MAX_STEPS):
        self.graph = graph
        self.client = client or AgentClient()
        self.pacing_delay = pacing_delay
        self.max_steps = max_steps
        self.states = ExecutionStateTable()
        self._active = threading.Lock()
        self._workflow = build_graph(self._step)

    # ---- presentation boundary ----

    def is_running(self) -> bool:
        return self._active.locked()

    def snapshot(self) -> Dict[str, NodeState]:
        return self.states.snapshot()

    def subscribe(self, listener):
        return self.states.subscribe(listener)

    # ---- run ----

    def run(self) -> Optional[Dict[str, NodeState]]:
        """Execute the workflow and return the final node states.

        Returns None without doing anything if a run is already in progress.
        Raises NoTriggerError or StepLimitExceeded for run-level failures;
        node failures are recorded on the node instead.
        """
        if not self._active.acquire(blocking=False):
            log.warning("Run already in progress -- ignoring", extra={"node": "engine"})
            return None

        try:
            start_run()
            self.states.reset(self.graph.node_ids())

            triggers = self.graph.triggers()
            if not triggers:
                raise NoTriggerError("No Start Trigger found.")
            trigger = triggers[0]
            if len(triggers) > 1:
                log.warning(
                    f"Several triggers found -- starting from {trigger.id}",
                    extra={"node": "engine"},
                )

            initial: RunState = {
                "queue": [WorkItem(trigger.id, trigger.config.initial_prompt or "")],
                "processed": frozenset(),
                "executed": 0,
            }

            with log_time("Workflow run", log):
                try:
                    # One pass per executed item plus the final pass that empties the queue
                    result = self._workflow.invoke(
                        initial, config={"recursion_limit": self.max_steps + 2}
                    )
                except GraphRecursionError as e:
                    raise self._step_limit_error() from e

            log.info(f"Workflow finished: {result['executed']} node runs", extra={"node": "engine"})
            log_summary()
            return self.snapshot()
        finally:
            self._active.release()

    def _next_item(self, queue: deque, processed: frozenset) -> Optional[WorkItem]:
        """Pop items until one that has not run yet and still has a node."""
        while queue:
            item = queue.popleft()
            if item in processed:
                log.debug(f"Skipping repeat of {item.node_id}", extra={"node": "engine"})
                continue
            if self.graph.get_node(item.node_id) is None:
                log.warning(f"Node {item.node_id} no longer exists -- skipping", extra={"node": "engine"})
                continue
            return item
        return None

    def _step_limit_error(self) -> StepLimitExceeded:
        return StepLimitExceeded(
            f"Workflow stopped after {self.max_steps} steps; "
            "check the graph for a cycle that keeps changing its payload."
        )

    def _step(self, state: RunState) -> dict:
        queue = deque(state["queue"])
        processed = state["processed"]

        item = self._next_item(queue, processed)
        if item is None:
            return {"queue": []}
        if state["executed"] >= self.max_steps:
            raise self._step_limit_error()

        node = self.graph.get_node(item.node_id)
        try:
            self.states.apply(NodeStarted(node.id))
            track("node_runs")
            if self.pacing_delay:
                time.sleep(self.pacing_delay)

            log.info(f"Running {node.label or node.id}", extra={"node": node.kind.value})
            result = execute_node(node, item.payload, self.client)

            if result.ok:
                self.states.apply(NodeSucceeded(node.id, result.output))
                for edge in self.graph.outgoing(node.id):
                    queue.append(WorkItem(edge.target, result.output))
            else:
                track("node_errors")
                self.states.apply(NodeFailed(node.id, result.error))
        except Exception as e:
            # A raising subscriber aborts the run; the node must not stay Running
            if self.states.get(node.id).status is NodeStatus.RUNNING:
                track("node_errors")
                self.states.apply(NodeFailed(node.id, str(e) or type(e).__name__))
            raise

        return {
            "queue": list(queue),
            "processed": processed | {item},
            "executed": state["executed"] + 1,
        }
