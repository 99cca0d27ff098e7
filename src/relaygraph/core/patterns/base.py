"""Base class and registry for the collaboration patterns.

Every pattern executor turns ``(input text, WorkflowSpec)`` into a
WorkflowResult. Expected failures (a failing agent, a timeout, a bad routing
decision) are reported in the result; executors do not raise for them.
"""

import abc
import time
from typing import ClassVar, Dict, Optional, Type

from relaygraph.core.errors import AgentInvocationError
from relaygraph.core.logging import LogComponent, get_logger, truncate
from relaygraph.core.patterns.pool import AgentPool
from relaygraph.core.patterns.result import AgentStepResult, WorkflowResult
from relaygraph.core.patterns.spec import AgentConfig, WorkflowPattern, WorkflowSpec

logger = get_logger(LogComponent.PATTERNS)

PATTERN_EXECUTORS: Dict[WorkflowPattern, Type["PatternExecutor"]] = {}


def register_pattern(cls):
    """Class decorator mapping ``cls.pattern`` to the executor class."""
    PATTERN_EXECUTORS[cls.pattern] = cls
    return cls


def elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class PatternExecutor(abc.ABC):
    """
    Runs one collaboration pattern.

    Args:
        pool: Worker pool for patterns that run agents concurrently. When
            omitted such patterns create and shut down their own pool per run.
    """
    pattern: ClassVar[WorkflowPattern]

    def __init__(self, pool: Optional[AgentPool] = None):
        self.pool = pool

    @abc.abstractmethod
    async def execute(self, input: str, spec: WorkflowSpec) -> WorkflowResult:
        """Run the pattern over the enabled agents of ``spec``."""

    def no_agents(self) -> WorkflowResult:
        return WorkflowResult.failure("No enabled agents configured", pattern=self.pattern)

    async def run_agent(self, config: AgentConfig, text: str) -> AgentStepResult:
        """Invoke one agent and record the call, successful or not."""
        logger.info(f"[{self.pattern.value}] agent '{config.name}' started")
        start = time.perf_counter()
        try:
            output = await config.agent.invoke(text)
        except Exception as e:
            error = e if isinstance(e, AgentInvocationError) else AgentInvocationError(str(e), agent_name=config.name)
            logger.error(f"[{self.pattern.value}] {error}")
            return AgentStepResult(
                agent_name=config.name,
                input=text,
                duration_ms=elapsed_ms(start),
                success=False,
                error_message=str(error),
            )

        step = AgentStepResult(
            agent_name=config.name,
            input=text,
            output=output,
            duration_ms=elapsed_ms(start),
        )
        logger.info(f"[{self.pattern.value}] agent '{config.name}' finished in {step.duration_ms}ms")
        logger.debug(f"[{self.pattern.value}] '{config.name}' output: {truncate(output, 200)}")
        return step
