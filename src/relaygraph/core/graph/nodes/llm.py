"""LLM node: send one state value to the agent and store the reply."""

from typing import Dict, Any

from relaygraph.core.agent.base import AgentInvoker, ConfigurableInvoker
from relaygraph.core.graph.nodes.base.node import (
    NodeExecutor,
    register_node_type,
    state_handler,
    read_text,
    logger,
)
from relaygraph.core.graph.spec import NodeConfig
from relaygraph.core.graph.state import StateStore, CURRENT_NODE_KEY
from relaygraph.core.logging import truncate


@register_node_type
class LLMNodeExecutor(NodeExecutor):
    """Calls the graph's agent with the text stored under ``input_key``.

    When the agent supports ``with_options`` the node's ``system_prompt``,
    ``temperature`` and ``max_tokens`` are applied to a per-call copy.
    Other agents get the input as is.
    """
    node_type = "LLM_NODE"
    description = "Invoke the LLM with one state value and store the response"
    config_schema = {
        "input_key": "State key read as the user message (required)",
        "output_key": "State key receiving the response (required)",
        "system_prompt": "System prompt for this call",
        "temperature": "Sampling temperature",
        "max_tokens": "Completion token limit",
    }
    required_keys = ["input_key", "output_key"]
    error_prefix = "LLM call failed"

    @state_handler
    async def execute(self, node: NodeConfig, state: StateStore, invoker: AgentInvoker) -> Dict[str, Any]:
        config = node.config
        input_key = config["input_key"]
        if input_key not in state:
            logger.warning(f"Node {node.id}: input key '{input_key}' is not set, sending empty input")
        text = read_text(state, input_key)

        agent = invoker
        options = {
            key: config[key]
            for key in ("system_prompt", "temperature", "max_tokens")
            if config.get(key) is not None
        }
        if options and isinstance(invoker, ConfigurableInvoker):
            agent = invoker.with_options(**options)

        logger.info(f"Node {node.id}: invoking LLM ({len(text)} chars)")
        response = await agent.invoke(text)
        logger.debug(f"Node {node.id}: response {truncate(response, 200)}")

        return {
            config["output_key"]: response,
            CURRENT_NODE_KEY: node.id,
        }
