"""Shared fixtures: a scripted agent client and small graph builders."""
import pytest

from agent_canvas.errors import InvocationError
from agent_canvas.model import Graph, NodeKind


class StubClient:
    """Answers from a prompt -> reply table and records every call.

    Prompts listed in ``fail`` raise InvocationError; prompts with no
    scripted reply get "reply to <prompt>".
    """

    def __init__(self, replies=None, fail=None, search_replies=None):
        self.replies = dict(replies or {})
        self.search_replies = dict(search_replies or {})
        self.fail = dict(fail or {})
        self.calls = []

    def invoke(self, prompt, config):
        self.calls.append(("invoke", prompt, config))
        if prompt in self.fail:
            raise InvocationError(self.fail[prompt])
        return self.replies.get(prompt, f"reply to {prompt}")

    def search(self, query):
        self.calls.append(("search", query, None))
        if query in self.fail:
            raise InvocationError(self.fail[query])
        return self.search_replies.get(query, f"results for {query}")


class ModelFailingClient(StubClient):
    """Fails every invoke for one model name, whatever the prompt."""

    def __init__(self, failing_model, message="quota exceeded", **kwargs):
        super().__init__(**kwargs)
        self.failing_model = failing_model
        self.message = message

    def invoke(self, prompt, config):
        if config.model == self.failing_model:
            self.calls.append(("invoke", prompt, config))
            raise InvocationError(self.message)
        return super().invoke(prompt, config)


@pytest.fixture
def linear_graph():
    """trigger -> agent -> output, same shape as the starter workflow."""
    graph = Graph()
    graph.create_node(NodeKind.TRIGGER, node_id="t", initial_prompt="Who is the CEO of Google?")
    graph.create_node(NodeKind.AGENT, node_id="a")
    graph.create_node(NodeKind.OUTPUT, node_id="o")
    graph.connect("t", "a")
    graph.connect("a", "o")
    return graph
