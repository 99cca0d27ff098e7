"""Parallel pattern: fan out to every agent, then merge.

Each agent gets the same input and its own timeout, counted from the moment
its task gets a worker slot. A timed-out agent is cancelled and recorded as
failed without affecting the others. Successful outputs are labeled with the
agent name and combined in submission order, either by a merge agent or by
joining them with blank lines.
"""

import asyncio
import time
from typing import List

from relaygraph.core.patterns.base import PatternExecutor, register_pattern, elapsed_ms, logger
from relaygraph.core.patterns.pool import AgentPool
from relaygraph.core.patterns.result import AgentStepResult, WorkflowResult
from relaygraph.core.patterns.spec import AgentConfig, WorkflowOptions, WorkflowPattern, WorkflowSpec

NO_RESULTS = "No results were collected"
MERGE_HEADER = "Results from each agent:"


def label_output(name: str, output: str) -> str:
    return f"[{name}]\n{output}"


@register_pattern
class ParallelPatternExecutor(PatternExecutor):
    """Runs all enabled agents concurrently on an AgentPool."""
    pattern = WorkflowPattern.PARALLEL

    async def execute(self, input: str, spec: WorkflowSpec) -> WorkflowResult:
        agents = spec.enabled_agents()
        if not agents:
            return self.no_agents()

        timeout = spec.options.per_agent_timeout
        logger.info(f"[PARALLEL] running {len(agents)} agents, timeout {timeout}s each")
        start = time.perf_counter()

        pool = self.pool or AgentPool()
        tasks = []
        try:
            try:
                for config in agents:
                    tasks.append(pool.submit(
                        self._run_with_timeout, config, input, timeout, name=f"agent:{config.name}"
                    ))
            except RuntimeError as e:
                logger.error(f"[PARALLEL] could not submit agents: {e}")
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                return WorkflowResult.failure(
                    f"Parallel execution failed: {e}",
                    pattern=self.pattern,
                    duration_ms=elapsed_ms(start),
                )
            results = await asyncio.gather(*tasks, return_exceptions=True)
        finally:
            if self.pool is None:
                await pool.shutdown()

        steps: List[AgentStepResult] = []
        for config, result in zip(agents, results):
            if isinstance(result, BaseException):
                result = AgentStepResult(
                    agent_name=config.name,
                    input=input,
                    success=False,
                    error_message=f"cancelled: {result!r}" if isinstance(result, asyncio.CancelledError) else str(result),
                )
            steps.append(result)

        failed = [step for step in steps if not step.success]
        outputs = [label_output(step.agent_name, step.output) for step in steps if step.success]
        final_result, metadata = await self._merge(outputs, spec.options)

        logger.info(f"[PARALLEL] finished, {len(steps) - len(failed)}/{len(steps)} agents succeeded")
        return WorkflowResult(
            success=not failed,
            final_result=final_result,
            error_message="; ".join(f"{step.agent_name}: {step.error_message}" for step in failed) or None,
            agent_results=steps,
            duration_ms=elapsed_ms(start),
            pattern=self.pattern,
            metadata=metadata,
        )

    async def _run_with_timeout(self, config: AgentConfig, text: str, timeout: float) -> AgentStepResult:
        start = time.perf_counter()
        try:
            return await asyncio.wait_for(self.run_agent(config, text), timeout)
        except asyncio.TimeoutError:
            logger.error(f"[PARALLEL] agent '{config.name}' timed out after {timeout}s")
            return AgentStepResult(
                agent_name=config.name,
                input=text,
                duration_ms=elapsed_ms(start),
                success=False,
                error_message="timed out",
            )

    async def _merge(self, outputs: List[str], options: WorkflowOptions):
        if not outputs:
            return NO_RESULTS, {}

        combined = "\n\n".join(outputs)
        if options.merge_agent is None or not options.merge_instruction:
            return combined, {}

        prompt = f"{options.merge_instruction}\n\n{MERGE_HEADER}\n\n{combined}"
        try:
            return await options.merge_agent.invoke(prompt), {"merged": True}
        except Exception as e:
            logger.error(f"[PARALLEL] merge failed, concatenating outputs instead: {e}")
            return combined, {"merged": False, "merge_error": str(e)}
