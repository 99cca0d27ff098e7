"""Tests for GraphRunner."""

import json

import pytest

from relaygraph.core.graph import GraphBuilder, GraphRunner, GraphSpec
from tests.conftest import EchoAgent

GRAPH_JSON = json.dumps({
    "name": "shout",
    "nodes": [
        {"id": "ask", "type": "LLM_NODE", "config": {"input_key": "question", "output_key": "answer"}},
        {"id": "lines", "type": "TRANSFORM_NODE",
         "config": {"transform_type": "SPLIT_LINES", "input_keys": ["answer"], "output_key": "lines"}},
    ],
    "edges": [
        {"from": "START", "to": "ask", "kind": "simple"},
        {"from": "ask", "to": "lines", "kind": "simple"},
        {"from": "lines", "to": "END", "kind": "simple"},
    ],
})


@pytest.fixture
def runner() -> GraphRunner:
    return GraphRunner(GraphBuilder(EchoAgent(prefix="echo:\n")))


class TestGraphRunner:
    """Test suite for GraphRunner."""

    @pytest.mark.asyncio
    async def test_run_json(self, runner: GraphRunner):
        result = await runner.run(GRAPH_JSON, {"question": "hi"})
        assert result["success"]
        assert result["data"]["answer"] == "echo:\nhi"
        assert result["data"]["lines"] == ["echo:", "hi"]

    @pytest.mark.asyncio
    async def test_run_dict_and_spec(self, runner: GraphRunner):
        data = json.loads(GRAPH_JSON)
        from_dict = await runner.run(data, {"question": "a"})
        from_spec = await runner.run(GraphSpec.model_validate(data), {"question": "a"})
        assert from_dict == from_spec

    @pytest.mark.asyncio
    async def test_malformed_json(self, runner: GraphRunner):
        result = await runner.run("{not json")
        assert not result["success"]
        assert result["error"]

    @pytest.mark.asyncio
    async def test_invalid_graph(self, runner: GraphRunner):
        data = json.loads(GRAPH_JSON)
        data["edges"] = data["edges"][:-1]
        result = await runner.run(data)
        assert result == {"success": False, "error": result["error"]}
        assert "no outgoing edge" in result["error"]

    @pytest.mark.asyncio
    async def test_register_and_run_named(self, runner: GraphRunner):
        graph = runner.register(GRAPH_JSON)
        assert runner.get("shout") is graph
        assert runner.names == ["shout"]

        result = await runner.run_named("shout", {"question": "again"})
        assert result["data"]["answer"] == "echo:\nagain"

        assert runner.remove("shout")
        assert not runner.remove("shout")
        missing = await runner.run_named("shout")
        assert missing == {"success": False, "error": "Graph not registered: shout"}

    def test_node_types(self, runner: GraphRunner):
        assert "TRANSFORM_NODE" in runner.node_types()
