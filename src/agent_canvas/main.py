"""
Command-line entry point for running an agent workflow.

Runs the starter workflow (trigger -> agent -> output), optionally with a
search step in front of the agent:

    agent-canvas --prompt "Who is the CEO of Google?"
    agent-canvas --search-step --prompt "Latest Python release" --report
"""
import argparse
import sys

from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.table import Table

from agent_canvas.client import AgentClient
from agent_canvas.config import PACING_DELAY
from agent_canvas.engine import WorkflowEngine
from agent_canvas.errors import WorkflowError
from agent_canvas.model import NodeKind, demo_graph
from agent_canvas.report import render_report
from agent_canvas.status import IDLE, NodeStatus

console = Console()

STATUS_STYLES = {
    NodeStatus.IDLE: "dim",
    NodeStatus.RUNNING: "blue",
    NodeStatus.SUCCESS: "green",
    NodeStatus.ERROR: "red",
}


def build_workflow(args):
    """Demo graph with the command-line overrides applied."""
    graph = demo_graph()
    trigger = graph.find_trigger()
    if args.prompt is not None:
        graph.update_config(trigger.id, initial_prompt=args.prompt)

    agent_changes = {}
    if args.model:
        agent_changes["model"] = args.model
    if args.system is not None:
        agent_changes["system_instruction"] = args.system or None
    if args.temperature is not None:
        agent_changes["temperature"] = args.temperature
    if args.use_search:
        agent_changes["use_search"] = True
    agent = next(n for n in graph.nodes if n.kind is NodeKind.AGENT)
    if agent_changes:
        graph.update_config(agent.id, **agent_changes)

    if args.search_step:
        search = graph.create_node(NodeKind.SEARCH, node_id="search", x=300, y=450)
        for edge in graph.outgoing(trigger.id):
            graph.disconnect(edge.id)
        graph.connect(trigger.id, search.id)
        graph.connect(search.id, agent.id)

    return graph


def print_results(graph, states):
    table = Table(show_header=True, padding=(0, 2))
    table.add_column("Node", style="bold")
    table.add_column("Kind", style="dim")
    table.add_column("Status")
    table.add_column("Output / Error")

    for node in graph.nodes:
        state = states.get(node.id, IDLE)
        style = STATUS_STYLES[state.status]
        detail = state.error_message or state.output or ""
        if len(detail) > 120:
            detail = detail[:117] + "..."
        table.add_row(escape(node.label), node.kind.value, f"[{style}]{state.status.value}[/{style}]", escape(detail))

    console.print(table)

    for node in graph.nodes:
        state = states.get(node.id, IDLE)
        if node.kind is NodeKind.OUTPUT and state.output:
            console.rule(f"[bold]{escape(node.label)}[/bold]", style="dim")
            console.print(Markdown(state.output))


def main(argv=None):
    """CLI interface for running the starter workflow."""
    parser = argparse.ArgumentParser(
        description="agent-canvas - run a trigger -> agent -> output workflow"
    )
    parser.add_argument("--prompt", type=str, help="Initial prompt of the trigger node")
    parser.add_argument("--model", type=str, help="Model for the agent node (e.g. 'gemini-2.5-flash')")
    parser.add_argument("--system", type=str, help="System instruction for the agent node ('' clears it)")
    parser.add_argument("--temperature", type=float, help="Sampling temperature for the agent node")
    parser.add_argument("--use-search", action="store_true", help="Ground the agent's answer in Google Search")
    parser.add_argument("--search-step", action="store_true", help="Insert a search node before the agent")
    parser.add_argument("--no-pacing", action="store_true", help="Skip the short pause after each node starts")
    parser.add_argument("--report", action="store_true", help="Write an HTML run report to the output folder")
    parser.add_argument("--verbose", action="store_true", help="Print node status changes as they happen")

    args = parser.parse_args(argv)

    graph = build_workflow(args)
    engine = WorkflowEngine(
        graph,
        client=AgentClient(),
        pacing_delay=0 if args.no_pacing else PACING_DELAY,
    )

    if args.verbose:
        engine.subscribe(
            lambda node_id, state: console.print(f"[dim]{node_id}: {state.status.value}[/dim]")
        )

    console.print("[*] Executing workflow...")
    try:
        states = engine.run()
    except WorkflowError as e:
        console.print(f"[red]\\[!] Workflow Error: {escape(str(e))}[/red]")
        return 1

    print_results(graph, states)

    if args.report:
        path = render_report(graph, states, title="Workflow run")
        console.print(f"\n[green][OK][/green] Report saved to: {path}")

    failed = [s for s in states.values() if s.status is NodeStatus.ERROR]
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
