"""relaygraph - declarative state graphs and multi-agent patterns for LLM workflows."""

from relaygraph.core import (
    AgentInvoker,
    CallableAgent,
    LLMAgent,
    GraphBuilder,
    GraphRunner,
    GraphSpec,
    ConfigurableWorkflow,
    WorkflowSpec,
    WorkflowResult,
    configure_logging,
    LogLevel,
    LogComponent,
)

__all__ = [
    'AgentInvoker',
    'CallableAgent',
    'LLMAgent',
    'GraphBuilder',
    'GraphRunner',
    'GraphSpec',
    'ConfigurableWorkflow',
    'WorkflowSpec',
    'WorkflowResult',
    'configure_logging',
    'LogLevel',
    'LogComponent',
]
