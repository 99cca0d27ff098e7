"""Exception hierarchy for relaygraph.

Build-time problems raise ``ConfigurationError`` before anything runs.
Run-time failures are downgraded where they happen: nodes turn them into an
``error_message`` state entry and pattern executors into a failed
``WorkflowResult``.
"""

from typing import Optional


class RelayGraphError(Exception):
    """Base class for all relaygraph errors."""


class ConfigurationError(RelayGraphError):
    """Invalid or incomplete graph or workflow specification."""


class NodeExecutionError(RelayGraphError):
    """A node failed while executing its action."""

    def __init__(self, node_id: str, message: str):
        self.node_id = node_id
        super().__init__(f"Node '{node_id}' failed: {message}")


class AgentInvocationError(RelayGraphError):
    """An agent call failed."""

    def __init__(self, message: str, agent_name: Optional[str] = None):
        self.agent_name = agent_name
        if agent_name:
            message = f"Agent '{agent_name}' failed: {message}"
        super().__init__(message)
