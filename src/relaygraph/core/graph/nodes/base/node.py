"""Base node executor for the graph system.

A node in a GraphSpec is plain configuration. Its behavior comes from a
NodeExecutor looked up by the node's type code. Executors are stateless:
one instance serves every node of its type in every graph.

Typical Usage:
    - Subclass NodeExecutor and set ``node_type``, ``description`` and
      ``config_schema``
    - Implement ``execute`` and decorate it with ``state_handler``
    - Register the class with ``@register_node_type``
"""

import abc
from typing import Dict, Any, Awaitable, Callable, ClassVar, List, Optional
from functools import wraps

from relaygraph.core.agent.base import AgentInvoker
from relaygraph.core.errors import ConfigurationError
from relaygraph.core.graph.spec import NodeConfig
from relaygraph.core.graph.state import StateStore, CURRENT_NODE_KEY, ERROR_MESSAGE_KEY
from relaygraph.core.logging import get_logger, LogComponent, truncate

# Get logger for node operations
logger = get_logger(LogComponent.NODES)

NodeAction = Callable[[StateStore], Awaitable[Dict[str, Any]]]

# Type code -> executor instance
NODE_EXECUTORS: Dict[str, "NodeExecutor"] = {}


def register_node_type(cls):
    """Class decorator that adds an executor to the type registry.

    Example:
        @register_node_type
        class UppercaseExecutor(NodeExecutor):
            node_type = "UPPERCASE_NODE"
            ...
    """
    code = cls.node_type.upper()
    if code in NODE_EXECUTORS:
        raise ValueError(f"Node type already registered: {code}")
    NODE_EXECUTORS[code] = cls()
    return cls


def get_node_executor(type_code: str) -> Optional["NodeExecutor"]:
    """Executor registered for ``type_code`` (case-insensitive), if any."""
    return NODE_EXECUTORS.get(type_code.upper())


def registered_node_types() -> Dict[str, str]:
    """Type code -> description for every registered executor."""
    return {code: executor.description for code, executor in NODE_EXECUTORS.items()}


def state_handler(func: Callable):
    """Decorator that turns a failing ``execute`` into an error update.

    The wrapped method always returns a partial update. On failure the
    update comes from the executor's ``error_update`` so the graph can keep
    going with whatever routing hint the executor provides.
    """
    @wraps(func)
    async def wrapper(self, node: NodeConfig, state: StateStore, invoker: AgentInvoker) -> Dict[str, Any]:
        try:
            return await func(self, node, state, invoker)
        except Exception as e:
            logger.error(f"Error in node {node.id}: {e}")
            return self.error_update(node, e)
    return wrapper


class NodeExecutor(abc.ABC):
    """
    Abstract executor for one node type.

    Attributes:
        node_type: Type code used in NodeConfig.type
        description: One-line description for registered_node_types()
        config_schema: Config key -> short description
        required_keys: Config keys that must be present and non-empty
        error_prefix: Prefix for the error_message written on failure
    """
    node_type: ClassVar[str]
    description: ClassVar[str] = ""
    config_schema: ClassVar[Dict[str, str]] = {}
    required_keys: ClassVar[List[str]] = []
    error_prefix: ClassVar[str] = "Node failed"

    def validate_config(self, node: NodeConfig) -> None:
        """Check required configuration at build time.

        Raises:
            ConfigurationError: If a required key is missing or empty
        """
        missing = [
            key for key in self.required_keys
            if node.config.get(key) is None or node.config.get(key) in ("", [], {})
        ]
        if missing:
            raise ConfigurationError(
                f"Node '{node.id}' ({self.node_type}) is missing required config: {', '.join(missing)}"
            )

    @abc.abstractmethod
    async def execute(self, node: NodeConfig, state: StateStore, invoker: AgentInvoker) -> Dict[str, Any]:
        """Run the node and return a partial state update."""

    def error_update(self, node: NodeConfig, error: Exception) -> Dict[str, Any]:
        """Partial update written when ``execute`` fails."""
        return {
            ERROR_MESSAGE_KEY: f"{self.error_prefix}: {error}",
            CURRENT_NODE_KEY: node.id,
        }

    def create_action(self, node: NodeConfig, invoker: AgentInvoker) -> NodeAction:
        """Bind this executor to one node of a compiled graph."""
        async def action(state: StateStore) -> Dict[str, Any]:
            update = await self.execute(node, state, invoker)
            logger.debug(f"Node {node.id} update: {truncate(str(update), 200)}")
            return update
        return action


def read_text(state: StateStore, key: str) -> str:
    """State value as text; missing values read as empty string."""
    value = state.get(key)
    return "" if value is None else str(value)
