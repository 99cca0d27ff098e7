"""Agent module for relaygraph."""

from relaygraph.core.agent.base import (
    AgentInvoker,
    ConfigurableInvoker,
    ToolCallingInvoker,
    CallableAgent,
    LLMAgent,
    as_invoker,
)
from relaygraph.core.agent.tools import AgentTool, ToolCallRecord, agent_as_tool

__all__ = [
    'AgentInvoker',
    'ConfigurableInvoker',
    'ToolCallingInvoker',
    'CallableAgent',
    'LLMAgent',
    'as_invoker',
    'AgentTool',
    'ToolCallRecord',
    'agent_as_tool',
]
