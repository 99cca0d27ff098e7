"""Condition node: pick the next node from a state value."""

from typing import Dict, Any

from relaygraph.core.agent.base import AgentInvoker
from relaygraph.core.errors import ConfigurationError
from relaygraph.core.graph.nodes.base.node import (
    NodeExecutor,
    register_node_type,
    state_handler,
    logger,
)
from relaygraph.core.graph.spec import NodeConfig, END
from relaygraph.core.graph.state import StateStore, CURRENT_NODE_KEY, NEXT_NODE_KEY, route_key


@register_node_type
class ConditionNodeExecutor(NodeExecutor):
    """Writes the routing decision to ``next_node`` for a following
    conditional edge.

    The value of ``condition_field`` is turned into a route key (booleans
    as "true"/"false", everything else with ``str``) and looked up in
    ``routes``. A missing or unmatched value routes to ``default_route``,
    which is END unless configured. Failures also route to the default.
    """
    node_type = "CONDITION_NODE"
    description = "Route on a state value by writing next_node"
    config_schema = {
        "condition_field": "State key whose value selects the route (required)",
        "routes": "Mapping of value to node id (required)",
        "default_route": "Node id for missing or unmatched values (default END)",
    }
    required_keys = ["condition_field", "routes"]
    error_prefix = "Condition evaluation failed"

    def validate_config(self, node: NodeConfig) -> None:
        super().validate_config(node)
        if not isinstance(node.config["routes"], dict):
            raise ConfigurationError(f"Node '{node.id}': routes must be a mapping of value to node id")

    @staticmethod
    def default_route(node: NodeConfig) -> str:
        return node.config.get("default_route") or END

    @state_handler
    async def execute(self, node: NodeConfig, state: StateStore, invoker: AgentInvoker) -> Dict[str, Any]:
        value = state.get(node.config["condition_field"])
        routes = node.config["routes"]

        if value is None:
            target = self.default_route(node)
        else:
            target = routes.get(route_key(value), self.default_route(node))

        logger.info(f"Node {node.id}: {node.config['condition_field']}={value!r} -> {target}")
        return {
            NEXT_NODE_KEY: target,
            CURRENT_NODE_KEY: node.id,
        }

    def error_update(self, node: NodeConfig, error: Exception) -> Dict[str, Any]:
        update = super().error_update(node, error)
        update[NEXT_NODE_KEY] = self.default_route(node)
        return update
