"""Node package initialization.

Importing this package registers the built-in node types.
"""

from relaygraph.core.graph.nodes.base.node import (
    NodeExecutor,
    NODE_EXECUTORS,
    register_node_type,
    get_node_executor,
    registered_node_types,
    state_handler,
)
from relaygraph.core.graph.nodes.llm import LLMNodeExecutor
from relaygraph.core.graph.nodes.condition import ConditionNodeExecutor
from relaygraph.core.graph.nodes.transform import TransformNodeExecutor, TransformType

__all__ = [
    # Base executor and registry
    "NodeExecutor",
    "NODE_EXECUTORS",
    "register_node_type",
    "get_node_executor",
    "registered_node_types",
    "state_handler",

    # Built-in node types
    "LLMNodeExecutor",
    "ConditionNodeExecutor",
    "TransformNodeExecutor",
    "TransformType",
]
