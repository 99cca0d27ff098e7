"""Core modules for relaygraph."""

from relaygraph.core.logging import configure_logging, LogLevel, LogComponent
from relaygraph.core.errors import (
    RelayGraphError,
    ConfigurationError,
    NodeExecutionError,
    AgentInvocationError,
)
from relaygraph.core.config import Settings, get_settings
from relaygraph.core.agent import AgentInvoker, CallableAgent, LLMAgent
from relaygraph.core.graph import GraphBuilder, GraphRunner, GraphSpec, Graph
from relaygraph.core.patterns import ConfigurableWorkflow, WorkflowSpec, WorkflowResult

__all__ = [
    'configure_logging',
    'LogLevel',
    'LogComponent',
    'RelayGraphError',
    'ConfigurationError',
    'NodeExecutionError',
    'AgentInvocationError',
    'Settings',
    'get_settings',
    'AgentInvoker',
    'CallableAgent',
    'LLMAgent',
    'GraphBuilder',
    'GraphRunner',
    'GraphSpec',
    'Graph',
    'ConfigurableWorkflow',
    'WorkflowSpec',
    'WorkflowResult',
]
