"""Supervisor pattern: a tool-calling agent delegates to workers.

Each enabled worker is exposed to the supervisor as a tool named after it.
The supervisor decides which workers to call, how often and in what order,
and its final answer is the workflow result. The reasoning loop itself
belongs to the supervisor agent (see ``LLMAgent.max_tool_rounds``).
"""

import time
from typing import List

from relaygraph.core.agent.base import ToolCallingInvoker
from relaygraph.core.agent.tools import ToolCallRecord, agent_as_tool
from relaygraph.core.errors import AgentInvocationError
from relaygraph.core.patterns.base import PatternExecutor, register_pattern, elapsed_ms, logger
from relaygraph.core.patterns.result import AgentStepResult, WorkflowResult
from relaygraph.core.patterns.spec import AgentConfig, WorkflowPattern, WorkflowSpec


def worker_description(agent: AgentConfig) -> str:
    return agent.description or f"Call {agent.name} to handle the task"


def build_supervisor_instruction(workers: List[AgentConfig]) -> str:
    lines = [
        "You are a supervisor coordinating a team of experts.",
        "",
        "Analyse the user's request and decide how to complete it.",
        "You can call the following experts as tools:",
        "",
    ]
    lines.extend(f"- {worker.name}: {worker_description(worker)}" for worker in workers)
    lines.extend([
        "",
        "How to work:",
        "1. Understand the goal of the request",
        "2. Decide which experts you need",
        "3. Call experts as needed, the same expert more than once if useful",
        "4. Combine their results into a final answer",
    ])
    return "\n".join(lines)


@register_pattern
class SupervisorPatternExecutor(PatternExecutor):
    """Runs the supervisor with every enabled worker available as a tool."""
    pattern = WorkflowPattern.SUPERVISOR

    async def execute(self, input: str, spec: WorkflowSpec) -> WorkflowResult:
        workers = spec.enabled_agents()
        if not workers:
            return self.no_agents()

        options = spec.options
        supervisor = options.supervisor_agent
        if not isinstance(supervisor, ToolCallingInvoker):
            return WorkflowResult.failure(
                "Supervisor requires a supervisor_agent that supports tools",
                pattern=self.pattern,
            )

        steps: List[AgentStepResult] = []

        def record(call: ToolCallRecord) -> None:
            steps.append(AgentStepResult(
                agent_name=call.agent_name,
                input=call.request,
                output=call.output if call.success else None,
                duration_ms=call.duration_ms,
                success=call.success,
                error_message=call.error_message,
            ))

        tools = [
            agent_as_tool(worker.name, worker.agent, worker_description(worker), record)
            for worker in workers
        ]
        instruction = options.supervisor_instruction or build_supervisor_instruction(workers)
        team = supervisor.with_tools(tools, instruction)
        metadata = {
            "supervisor": options.supervisor_name,
            "workers": [worker.name for worker in workers],
        }

        logger.info(f"[SUPERVISOR] '{options.supervisor_name}' coordinating {metadata['workers']}")
        start = time.perf_counter()
        try:
            final = await team.invoke(input)
        except Exception as e:
            error = e if isinstance(e, AgentInvocationError) else AgentInvocationError(str(e), options.supervisor_name)
            logger.error(f"[SUPERVISOR] {error}")
            return WorkflowResult.failure(
                str(error),
                pattern=self.pattern,
                agent_results=steps,
                duration_ms=elapsed_ms(start),
                metadata=metadata,
            )

        metadata["worker_calls"] = len(steps)
        logger.info(f"[SUPERVISOR] finished after {len(steps)} worker calls")
        return WorkflowResult(
            success=True,
            final_result=final,
            agent_results=steps,
            duration_ms=elapsed_ms(start),
            pattern=self.pattern,
            metadata=metadata,
        )
