"""
Team Patterns Example: the same three agents under each collaboration pattern.

This example demonstrates:
1. Parallel haiku writers merged by an editor agent
2. Routing a request to the best-suited expert
3. A supervisor calling experts as tools
4. Loading a workflow from stored configuration

Requires OPENAI_API_KEY.
"""

import asyncio

from relaygraph.core.agent import LLMAgent
from relaygraph.core.logging import LogComponent, LogLevel, configure_logging, get_logger
from relaygraph.core.patterns import (
    AgentConfig,
    AgentPool,
    ConfigurableWorkflow,
    WorkflowOptions,
    WorkflowPattern,
    WorkflowResult,
    WorkflowSpec,
)

logger = get_logger(LogComponent.WORKFLOW)

poet = LLMAgent(name="poet", system_prompt="You write haiku with a 5-7-5 syllable pattern.", temperature=0.9)
scientist = LLMAgent(name="scientist", system_prompt="You explain science precisely and briefly.")
critic = LLMAgent(name="critic", system_prompt="You give short, concrete critique.")
coordinator = LLMAgent(name="coordinator", max_tool_rounds=5)

STORED_WORKFLOW = {
    "pattern": "parallel",
    "agents": [
        {"name": "poet", "description": "Writes poetry"},
        {"name": "scientist", "description": "Explains science"},
        {"name": "critic", "description": "Reviews work", "enabled": False},
    ],
    "options": {
        "perAgentTimeout": 60,
        "mergeInstruction": "Combine both answers into one short piece.",
        "verbose": True,
    },
}


def team():
    return [
        AgentConfig(name="poet", description="Writes poetry", agent=poet),
        AgentConfig(name="scientist", description="Explains science", agent=scientist),
        AgentConfig(name="critic", description="Reviews and improves work", agent=critic),
    ]


def report(title: str, result: WorkflowResult) -> None:
    logger.info(f"{title}: success={result.success} in {result.duration_ms}ms")
    for step in result.agent_results:
        logger.info(f"  {step.agent_name}: {'ok' if step.success else step.error_message}")
    print(result.final_result or result.error_message)


async def main():
    configure_logging(default_level=LogLevel.INFO)

    async with AgentPool(max_workers=4) as pool:
        parallel = ConfigurableWorkflow(
            WorkflowSpec(
                pattern=WorkflowPattern.PARALLEL,
                agents=team()[:2],
                options=WorkflowOptions(
                    per_agent_timeout=60,
                    merge_agent=critic,
                    merge_instruction="Pick the better haiku and explain why in one sentence.",
                ),
            ),
            pool=pool,
        )
        report("Parallel", await parallel.execute("Write a haiku about entropy."))

        stored = ConfigurableWorkflow(
            WorkflowSpec.from_dict(
                STORED_WORKFLOW,
                {"poet": poet, "scientist": scientist, "critic": critic},
                merge_agent=critic,
            ),
            pool=pool,
        )
        report("Stored", await stored.execute("Describe the moon."))

    routing = ConfigurableWorkflow(WorkflowSpec(
        pattern=WorkflowPattern.ROUTING,
        agents=team(),
        options=WorkflowOptions(routing_agent=LLMAgent(name="router", temperature=0)),
    ))
    result = await routing.execute("Why is the sky blue?")
    logger.info(f"Router picked {result.metadata.get('selected_agent')}")
    report("Routing", result)

    supervisor = ConfigurableWorkflow(WorkflowSpec(
        pattern=WorkflowPattern.SUPERVISOR,
        agents=team(),
        options=WorkflowOptions(supervisor_agent=coordinator, supervisor_name="coordinator"),
    ))
    report("Supervisor", await supervisor.execute("Write a haiku about photosynthesis and check its facts."))


if __name__ == "__main__":
    asyncio.run(main())
