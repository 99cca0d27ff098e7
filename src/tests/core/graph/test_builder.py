"""Tests for GraphBuilder validation and compilation."""

from typing import Any, Dict, List

import pytest

from relaygraph.core.errors import ConfigurationError
from relaygraph.core.graph import Graph, GraphBuilder, GraphSpec, MergeStrategy
from tests.conftest import EchoAgent


def make_spec(nodes: List[Dict[str, Any]], edges: List[Dict[str, Any]], **extra) -> GraphSpec:
    data = {"name": "test-graph", "nodes": nodes, "edges": edges}
    data.update(extra)
    return GraphSpec.model_validate(data)


def llm_node(node_id: str, **config) -> Dict[str, Any]:
    config.setdefault("input_key", "input")
    config.setdefault("output_key", node_id)
    return {"id": node_id, "type": "LLM_NODE", "config": config}


def edge(source: str, target: str) -> Dict[str, Any]:
    return {"from": source, "to": target, "kind": "simple"}


@pytest.fixture
def builder() -> GraphBuilder:
    return GraphBuilder(EchoAgent())


@pytest.fixture
def linear_spec() -> GraphSpec:
    return make_spec(
        [llm_node("a"), llm_node("b")],
        [edge("START", "a"), edge("a", "b"), edge("b", "END")],
        stateKeys=[{"key": "log", "append": True}],
    )


class TestValidate:
    """Test suite for structural validation."""

    def test_strategies(self, builder: GraphBuilder, linear_spec: GraphSpec):
        """Test declared strategies plus the injected next_node key."""
        strategies = builder.validate(linear_spec)
        assert strategies["log"] == MergeStrategy.APPEND
        assert strategies["next_node"] == MergeStrategy.REPLACE

    def test_declared_next_node_is_kept(self, builder: GraphBuilder):
        spec = make_spec(
            [llm_node("a")],
            [edge("START", "a"), edge("a", "END")],
            stateKeys=[{"key": "next_node", "append": True}],
        )
        assert builder.validate(spec)["next_node"] == MergeStrategy.APPEND

    @pytest.mark.parametrize("nodes, edges, message", [
        ([llm_node("a"), llm_node("a")], [edge("START", "a"), edge("a", "END")], "duplicate node id"),
        ([llm_node("a")], [edge("START", "a"), edge("a", "missing")], "unknown node 'missing'"),
        ([llm_node("a")], [edge("START", "a"), edge("ghost", "END")], "unknown node 'ghost'"),
        ([llm_node("a")], [edge("START", "a")], "no outgoing edge"),
        ([llm_node("a")], [edge("START", "a"), edge("a", "END"), edge("a", "START")], "leads into START"),
        ([llm_node("a")], [edge("START", "a"), edge("a", "END"), edge("END", "a")], "leaves END"),
        ([llm_node("a")], [edge("a", "END")], "exactly one edge from START"),
        ([llm_node("a"), llm_node("b")],
         [edge("START", "a"), edge("START", "b"), edge("a", "END"), edge("b", "END")],
         "exactly one edge from START"),
        ([llm_node("a")], [edge("START", "a"), edge("a", "END"), edge("a", "END")], "2 outgoing edges"),
        ([llm_node("START")], [edge("START", "END")], "reserved"),
        ([], [edge("START", "END")], "no nodes"),
        ([llm_node("a")], [], "no edges"),
    ])
    def test_structure_errors(self, builder: GraphBuilder, nodes, edges, message):
        """Test that structural problems are reported before building."""
        with pytest.raises(ConfigurationError, match=message):
            builder.validate(make_spec(nodes, edges))

    def test_empty_name(self, builder: GraphBuilder):
        spec = GraphSpec.model_validate({
            "name": " ",
            "nodes": [llm_node("a")],
            "edges": [edge("START", "a"), edge("a", "END")],
        })
        with pytest.raises(ConfigurationError, match="name is empty"):
            builder.validate(spec)

    def test_conditional_edge_needs_routes(self, builder: GraphBuilder):
        spec = make_spec(
            [llm_node("a")],
            [edge("START", "a"), {"from": "a", "kind": "conditional"}],
        )
        with pytest.raises(ConfigurationError, match="has no routes"):
            builder.validate(spec)

    def test_simple_edge_rejects_routes(self, builder: GraphBuilder):
        spec = make_spec(
            [llm_node("a")],
            [edge("START", "a"), {"from": "a", "to": "END", "kind": "simple", "routes": {"x": "END"}}],
        )
        with pytest.raises(ConfigurationError, match="must not define routes"):
            builder.validate(spec)

    def test_dangling_default_route(self, builder: GraphBuilder):
        spec = make_spec(
            [llm_node("a")],
            [edge("START", "a"),
             {"from": "a", "kind": "conditional", "routes": {"x": "END"}, "defaultRoute": "nowhere"}],
        )
        with pytest.raises(ConfigurationError, match="unknown node 'nowhere'"):
            builder.validate(spec)


class TestBuild:
    """Test suite for compiling specs."""

    def test_build_linear(self, builder: GraphBuilder, linear_spec: GraphSpec):
        graph = builder.build(linear_spec)
        assert isinstance(graph, Graph)
        assert set(graph.actions) == {"a", "b"}
        assert set(graph.edges) == {"START", "a", "b"}

    def test_unknown_node_type(self, builder: GraphBuilder):
        spec = make_spec(
            [{"id": "a", "type": "MYSTERY_NODE", "config": {}}],
            [edge("START", "a"), edge("a", "END")],
        )
        with pytest.raises(ConfigurationError, match="Unknown node type 'MYSTERY_NODE'"):
            builder.build(spec)

    def test_missing_node_config(self, builder: GraphBuilder):
        spec = make_spec(
            [{"id": "a", "type": "LLM_NODE", "config": {"input_key": "q"}}],
            [edge("START", "a"), edge("a", "END")],
        )
        with pytest.raises(ConfigurationError, match="output_key"):
            builder.build(spec)

    def test_type_codes_are_case_insensitive(self, builder: GraphBuilder):
        spec = make_spec(
            [{"id": "a", "type": "llm_node", "config": {"input_key": "q", "output_key": "r"}}],
            [edge("START", "a"), edge("a", "END")],
        )
        assert "a" in builder.build(spec).actions

    def test_registered_node_types(self, builder: GraphBuilder):
        types = builder.registered_node_types()
        assert {"LLM_NODE", "CONDITION_NODE", "TRANSFORM_NODE"} <= set(types)
        assert all(types.values())

    def test_callable_agent_is_accepted(self, linear_spec: GraphSpec):
        graph = GraphBuilder(lambda text: text).build(linear_spec)
        assert graph.name == "test-graph"

    def test_spec_is_frozen(self, linear_spec: GraphSpec):
        with pytest.raises(ValueError):
            linear_spec.name = "changed"

    def test_node_lookup(self, linear_spec: GraphSpec):
        assert linear_spec.node("a").type == "LLM_NODE"
        assert linear_spec.node("missing") is None
