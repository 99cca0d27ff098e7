"""Routing pattern: one decision call picks the agent that answers."""

import time
from typing import List, Optional

from relaygraph.core.patterns.base import PatternExecutor, register_pattern, elapsed_ms, logger
from relaygraph.core.patterns.result import WorkflowResult
from relaygraph.core.patterns.spec import AgentConfig, WorkflowPattern, WorkflowSpec
from relaygraph.core.logging import truncate

DEFAULT_ROUTING_INSTRUCTION = """You are a router that decides which expert should handle the user's request.

Available experts:
{catalog}

User request: {input}

Pick the single most suitable expert. Reply with the expert's name only, nothing else."""


def build_catalog(agents: List[AgentConfig]) -> str:
    return "\n".join(
        f"- name: {agent.name}, description: {agent.description or 'No description'}"
        for agent in agents
    )


def build_routing_prompt(input: str, agents: List[AgentConfig], instruction: Optional[str] = None) -> str:
    catalog = build_catalog(agents)
    if not instruction:
        return DEFAULT_ROUTING_INSTRUCTION.format(catalog=catalog, input=input)
    return f"{instruction}\n\nAvailable experts:\n{catalog}\n\nUser request: {input}"


def resolve_agent(decision: str, agents: List[AgentConfig]) -> AgentConfig:
    """Match a routing decision to an agent.

    Exact name (case-insensitive) wins, then the first agent whose name
    appears in the decision, then the first agent.
    """
    wanted = decision.strip().lower()
    for agent in agents:
        if agent.name.lower() == wanted:
            return agent
    for agent in agents:
        if agent.name.lower() in wanted:
            return agent
    return agents[0]


@register_pattern
class RoutingPatternExecutor(PatternExecutor):
    """Asks ``routing_agent`` which enabled agent should answer, then runs it."""
    pattern = WorkflowPattern.ROUTING

    async def execute(self, input: str, spec: WorkflowSpec) -> WorkflowResult:
        agents = spec.enabled_agents()
        if not agents:
            return self.no_agents()

        router = spec.options.routing_agent
        if router is None:
            return WorkflowResult.failure("Routing requires a routing_agent", pattern=self.pattern)

        start = time.perf_counter()
        prompt = build_routing_prompt(input, agents, spec.options.routing_instruction)
        try:
            decision = (await router.invoke(prompt)).strip()
        except Exception as e:
            logger.error(f"[ROUTING] decision failed: {e}")
            return WorkflowResult.failure(
                f"Routing decision failed: {e}",
                pattern=self.pattern,
                duration_ms=elapsed_ms(start),
            )

        selected = resolve_agent(decision, agents)
        metadata = {"decision": decision, "selected_agent": selected.name}
        logger.info(f"[ROUTING] decision {truncate(decision)!r} -> '{selected.name}'")

        step = await self.run_agent(selected, input)
        if not step.success:
            return WorkflowResult.failure(
                step.error_message,
                pattern=self.pattern,
                agent_results=[step],
                duration_ms=elapsed_ms(start),
                metadata=metadata,
            )

        return WorkflowResult(
            success=True,
            final_result=step.output,
            agent_results=[step],
            duration_ms=elapsed_ms(start),
            pattern=self.pattern,
            metadata=metadata,
        )
