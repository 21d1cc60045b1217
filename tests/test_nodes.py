"""Tests for per-kind node behaviour."""
from agent_canvas.model import AgentConfig, Node, NodeKind, OutputConfig, SearchConfig, TriggerConfig
from agent_canvas.nodes import HANDLERS, NodeResult, execute_node

from conftest import StubClient


def test_every_kind_has_a_handler():
    assert set(HANDLERS) == set(NodeKind)


def test_trigger_ignores_payload():
    node = Node(id="t", config=TriggerConfig(initial_prompt="hello"))
    assert execute_node(node, "something else", StubClient()) == NodeResult.success("hello")


def test_agent_passes_payload_and_config():
    client = StubClient(replies={"in": "out"})
    config = AgentConfig(model="m", use_search=True)
    result = execute_node(Node(id="a", config=config), "in", client)
    assert result.ok
    assert result.output == "out"
    assert client.calls == [("invoke", "in", config)]


def test_search_uses_payload_as_query():
    client = StubClient(search_replies={"weather": "sunny"})
    assert execute_node(Node(id="s", config=SearchConfig()), "weather", client).output == "sunny"


def test_output_passes_through():
    client = StubClient()
    assert execute_node(Node(id="o", config=OutputConfig()), "final", client).output == "final"
    assert client.calls == []


def test_invocation_error_becomes_failure():
    client = StubClient(fail={"in": "API Key is missing."})
    result = execute_node(Node(id="a", config=AgentConfig()), "in", client)
    assert not result.ok
    assert result.error == "API Key is missing."
    assert result.output is None


def test_unexpected_error_becomes_failure():
    class MalformedClient(StubClient):
        def invoke(self, prompt, config):
            return {}["candidates"]

    result = execute_node(Node(id="a", config=AgentConfig()), "in", MalformedClient())
    assert not result.ok
    assert result.error == "'candidates'"
