"""Sequential pattern: agents run one after another."""

import time

from relaygraph.core.patterns.base import PatternExecutor, register_pattern, elapsed_ms, logger
from relaygraph.core.patterns.result import WorkflowResult
from relaygraph.core.patterns.spec import WorkflowPattern, WorkflowSpec


@register_pattern
class SequentialPatternExecutor(PatternExecutor):
    """Runs the enabled agents in declared order.

    With ``chain_output`` each agent receives the previous agent's output,
    otherwise every agent receives the original input. The first failure
    stops the chain; the steps recorded so far, including the failed one,
    are kept in the result.
    """
    pattern = WorkflowPattern.SEQUENTIAL

    async def execute(self, input: str, spec: WorkflowSpec) -> WorkflowResult:
        agents = spec.enabled_agents()
        if not agents:
            return self.no_agents()

        chain = spec.options.chain_output
        logger.info(f"[SEQUENTIAL] running {len(agents)} agents, chain_output={chain}")
        start = time.perf_counter()

        steps = []
        current = input
        for config in agents:
            step = await self.run_agent(config, current if chain else input)
            steps.append(step)
            if not step.success:
                return WorkflowResult.failure(
                    step.error_message,
                    pattern=self.pattern,
                    agent_results=steps,
                    duration_ms=elapsed_ms(start),
                )
            current = step.output

        return WorkflowResult(
            success=True,
            final_result=steps[-1].output,
            agent_results=steps,
            duration_ms=elapsed_ms(start),
            pattern=self.pattern,
        )
