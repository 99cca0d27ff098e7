"""Graph package initialization.

Exposes the declarative spec, the builder and the executable graph.
"""

from relaygraph.core.graph.spec import (
    START,
    END,
    EdgeKind,
    StateKeyConfig,
    NodeConfig,
    EdgeConfig,
    GraphSpec,
)
from relaygraph.core.graph.state import MergeStrategy, StateStore
from relaygraph.core.graph.base import Graph, DirectEdge, ConditionalEdge
from relaygraph.core.graph.builder import GraphBuilder
from relaygraph.core.graph.runner import GraphRunner
from relaygraph.core.graph.nodes import (
    NodeExecutor,
    register_node_type,
    registered_node_types,
    state_handler,
)

__all__ = [
    # Spec
    "START",
    "END",
    "EdgeKind",
    "StateKeyConfig",
    "NodeConfig",
    "EdgeConfig",
    "GraphSpec",

    # Execution
    "MergeStrategy",
    "StateStore",
    "Graph",
    "DirectEdge",
    "ConditionalEdge",
    "GraphBuilder",
    "GraphRunner",

    # Node types
    "NodeExecutor",
    "register_node_type",
    "registered_node_types",
    "state_handler",
]
