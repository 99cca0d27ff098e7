"""Configurable multi-agent workflow.

ConfigurableWorkflow checks a WorkflowSpec once, when it is created, and then
runs it any number of times with the executor registered for its pattern.

Example:
    ```python
    workflow = ConfigurableWorkflow(WorkflowSpec(
        pattern=WorkflowPattern.ROUTING,
        agents=[
            AgentConfig(name="coder", description="Writes code", agent=coder),
            AgentConfig(name="writer", description="Writes prose", agent=writer),
        ],
        options=WorkflowOptions(routing_agent=router),
    ))
    result = await workflow.execute("Write a haiku about pointers")
    ```
"""

from typing import Optional

from relaygraph.core.agent.base import ToolCallingInvoker
from relaygraph.core.errors import ConfigurationError
from relaygraph.core.logging import LogComponent, get_logger, truncate
from relaygraph.core.patterns.base import PATTERN_EXECUTORS, PatternExecutor
from relaygraph.core.patterns.pool import AgentPool
from relaygraph.core.patterns.result import WorkflowResult
from relaygraph.core.patterns.spec import WorkflowPattern, WorkflowSpec

# Register the built-in patterns
from relaygraph.core.patterns import sequential, parallel, routing, supervisor  # noqa: F401

logger = get_logger(LogComponent.WORKFLOW)


class ConfigurableWorkflow:
    """Validated WorkflowSpec bound to its pattern executor.

    Args:
        spec: The workflow to run
        pool: Optional worker pool shared by parallel runs; the caller owns
            it and shuts it down

    Raises:
        ConfigurationError: If the spec cannot run
    """

    def __init__(self, spec: WorkflowSpec, pool: Optional[AgentPool] = None):
        self.spec = spec
        self._validate()
        self.executor: PatternExecutor = PATTERN_EXECUTORS[spec.pattern](pool=pool)

    @property
    def pattern(self) -> WorkflowPattern:
        return self.spec.pattern

    @property
    def name(self) -> str:
        return self.spec.options.name or self.spec.pattern.value.lower()

    def _validate(self) -> None:
        spec = self.spec
        if not spec.agents:
            raise ConfigurationError("Workflow needs at least one agent")
        enabled = spec.enabled_agents()
        if not enabled:
            raise ConfigurationError("Workflow has no enabled agents")

        names = [agent.name for agent in spec.agents]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ConfigurationError(f"Duplicate agent names: {', '.join(duplicates)}")

        if spec.pattern not in PATTERN_EXECUTORS:
            raise ConfigurationError(f"Unsupported workflow pattern: {spec.pattern}")
        if spec.pattern == WorkflowPattern.ROUTING and spec.options.routing_agent is None:
            raise ConfigurationError("ROUTING workflows need a routing_agent")
        if spec.pattern == WorkflowPattern.SUPERVISOR and not isinstance(
            spec.options.supervisor_agent, ToolCallingInvoker
        ):
            raise ConfigurationError("SUPERVISOR workflows need a supervisor_agent that supports tools")

    async def execute(self, input: str) -> WorkflowResult:
        """Run the workflow on ``input``. Never raises for agent failures."""
        logger.info(f"Workflow '{self.name}' ({self.pattern.value}) started: {truncate(input)}")
        try:
            result = await self.executor.execute(input, self.spec)
        except Exception as e:
            logger.error(f"Workflow '{self.name}' raised: {e}")
            return WorkflowResult.failure(f"Workflow execution failed: {e}", pattern=self.pattern)

        if self.spec.options.verbose:
            for step in result.agent_results:
                status = "ok" if step.success else f"failed ({step.error_message})"
                logger.info(f"  {step.agent_name}: {status} in {step.duration_ms}ms")

        if result.success:
            logger.info(f"Workflow '{self.name}' succeeded in {result.duration_ms}ms")
        else:
            logger.warning(f"Workflow '{self.name}' failed: {result.error_message}")
        return result
