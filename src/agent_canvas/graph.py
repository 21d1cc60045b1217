"""LangGraph workflow definition.

Builds the single-node loop that drains a run's work queue:
  step -> step -> ... -> END (once the queue is empty)

Each pass through ``step`` executes at most one work item; the engine
counts executions against its step cap.
"""
from langgraph.graph import END, StateGraph

from agent_canvas.state import RunState


def _route(state: RunState) -> str:
    """Keep stepping while work is queued."""
    return "step" if state["queue"] else END


def build_graph(step):
    """Build and compile the run loop around the given step function."""
    graph = StateGraph(RunState)

    graph.add_node("step", step)
    graph.set_entry_point("step")
    graph.add_conditional_edges("step", _route, {"step": "step", END: END})

    return graph.compile()
