"""Multi-agent collaboration patterns.

Four strategies over a flat list of agents, independent of the graph engine:
sequential chain, parallel fan-out with merge, LLM routing and supervisor
delegation.
"""

from relaygraph.core.patterns.spec import (
    WorkflowPattern,
    AgentConfig,
    WorkflowOptions,
    WorkflowSpec,
)
from relaygraph.core.patterns.result import AgentStepResult, WorkflowResult
from relaygraph.core.patterns.pool import AgentPool
from relaygraph.core.patterns.base import PatternExecutor, PATTERN_EXECUTORS, register_pattern
from relaygraph.core.patterns.sequential import SequentialPatternExecutor
from relaygraph.core.patterns.parallel import ParallelPatternExecutor
from relaygraph.core.patterns.routing import RoutingPatternExecutor
from relaygraph.core.patterns.supervisor import SupervisorPatternExecutor
from relaygraph.core.patterns.workflow import ConfigurableWorkflow

__all__ = [
    # Specs and results
    "WorkflowPattern",
    "AgentConfig",
    "WorkflowOptions",
    "WorkflowSpec",
    "AgentStepResult",
    "WorkflowResult",

    # Execution
    "AgentPool",
    "PatternExecutor",
    "PATTERN_EXECUTORS",
    "register_pattern",
    "SequentialPatternExecutor",
    "ParallelPatternExecutor",
    "RoutingPatternExecutor",
    "SupervisorPatternExecutor",
    "ConfigurableWorkflow",
]
