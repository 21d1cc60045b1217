"""HTML renderer for run reports.

Deterministic (no LLM call) -- loads a Jinja2 template, fills it with the
graph and the final node states, and saves the result to disk.
"""
import html
import os
import re
from datetime import datetime
from pathlib import Path
from typing import Dict

import markdown
from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from agent_canvas.config import OUTPUT_DIR
from agent_canvas.logger import get_logger
from agent_canvas.model import Graph
from agent_canvas.status import IDLE, NodeState

log = get_logger("report")

TEMPLATE_DIR = Path(__file__).parent / "templates"


def _render_output(text: str) -> Markup:
    """Render node output as Markdown so citation links become anchors.

    The text is HTML-escaped first; model output is never trusted as markup.
    """
    return Markup(markdown.markdown(html.escape(text, quote=False)))


def _clean_filename(text: str) -> str:
    """Create a safe filename from text."""
    clean = re.sub(r"[^a-z0-9]+", "_", text.lower())
    return clean[:40].strip("_")


def build_rows(graph: Graph, states: Dict[str, NodeState]) -> list:
    """One row per node, in graph order, with the state the run left it in."""
    rows = []
    for node in graph.nodes:
        state = states.get(node.id, IDLE)
        rows.append({
            "id": node.id,
            "label": node.label or node.id,
            "kind": node.kind.value,
            "status": state.status.value,
            "output": _render_output(state.output) if state.output else None,
            "error": state.error_message,
        })
    return rows


def render_html(graph: Graph, states: Dict[str, NodeState], title: str = "Workflow run") -> str:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(["html"]),
    )
    template = env.get_template("run_report.html")

    return template.render(
        title=title,
        rows=build_rows(graph, states),
        edges=[
            (graph.get_node(e.source), graph.get_node(e.target)) for e in graph.edges
        ],
        timestamp=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
    )


def render_report(graph: Graph, states: Dict[str, NodeState], title: str = "Workflow run",
                  output_dir: str = OUTPUT_DIR) -> str:
    """Render the report and save it. Returns the file path."""
    page = render_html(graph, states, title)

    os.makedirs(output_dir, exist_ok=True)
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    filepath = os.path.join(output_dir, f"{ts}_{_clean_filename(title)}_run_report.html")

    with open(filepath, "w", encoding="utf-8") as f:
        f.write(page)

    log.info(f"Report saved to {filepath}", extra={"node": "report"})
    return filepath
