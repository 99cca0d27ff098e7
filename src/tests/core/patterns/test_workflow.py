"""Tests for WorkflowSpec and ConfigurableWorkflow."""

import pytest
from pydantic import ValidationError

from relaygraph.core.errors import ConfigurationError
from relaygraph.core.patterns import (
    AgentConfig,
    ConfigurableWorkflow,
    RoutingPatternExecutor,
    SequentialPatternExecutor,
    WorkflowOptions,
    WorkflowPattern,
    WorkflowResult,
    WorkflowSpec,
)
from tests.conftest import EchoAgent, FixedAgent, ScriptedSupervisor


class TestWorkflowSpec:
    """Test suite for WorkflowSpec."""

    def test_pattern_is_case_insensitive(self):
        spec = WorkflowSpec(pattern=" parallel ", agents=[])
        assert spec.pattern == WorkflowPattern.PARALLEL

    def test_unknown_pattern(self):
        with pytest.raises(ValidationError):
            WorkflowSpec(pattern="BROADCAST")

    def test_option_defaults(self, monkeypatch):
        monkeypatch.setenv("RELAYGRAPH_AGENT_TIMEOUT", "45")
        options = WorkflowOptions()
        assert options.chain_output
        assert options.per_agent_timeout == 45
        assert options.supervisor_name == "supervisor"

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            WorkflowOptions(per_agent_timeout=0)

    def test_agent_is_required(self):
        with pytest.raises(ValidationError):
            AgentConfig(name="nobody", agent=None)

    def test_from_dict(self):
        data = {
            "pattern": "sequential",
            "agents": [
                {"name": "a", "description": "first"},
                {"name": "b", "enabled": False},
            ],
            "options": {"chainOutput": False, "perAgentTimeout": 30, "routingInstruction": "Pick"},
        }
        router = FixedAgent("a")
        spec = WorkflowSpec.from_dict(data, {"a": EchoAgent(), "b": EchoAgent()}, routing_agent=router)

        assert spec.pattern == WorkflowPattern.SEQUENTIAL
        assert [agent.name for agent in spec.enabled_agents()] == ["a"]
        assert spec.agents[0].description == "first"
        assert not spec.options.chain_output
        assert spec.options.per_agent_timeout == 30
        assert spec.options.routing_instruction == "Pick"
        assert spec.options.routing_agent is router

    def test_from_dict_unbound_agent(self):
        data = {"pattern": "SEQUENTIAL", "agents": [{"name": "ghost"}]}
        with pytest.raises(ConfigurationError, match="No agent bound for 'ghost'"):
            WorkflowSpec.from_dict(data, {})


class TestConfigurableWorkflow:
    """Test suite for ConfigurableWorkflow."""

    def test_executor_matches_pattern(self):
        workflow = ConfigurableWorkflow(WorkflowSpec(
            pattern=WorkflowPattern.SEQUENTIAL,
            agents=[AgentConfig(name="a", agent=EchoAgent())],
        ))
        assert isinstance(workflow.executor, SequentialPatternExecutor)
        assert workflow.name == "sequential"

        routed = ConfigurableWorkflow(WorkflowSpec(
            pattern=WorkflowPattern.ROUTING,
            agents=[AgentConfig(name="a", agent=EchoAgent())],
            options=WorkflowOptions(routing_agent=FixedAgent("a"), name="helpdesk"),
        ))
        assert isinstance(routed.executor, RoutingPatternExecutor)
        assert routed.name == "helpdesk"

    @pytest.mark.parametrize("spec, message", [
        (WorkflowSpec(pattern="SEQUENTIAL"), "at least one agent"),
        (WorkflowSpec(pattern="SEQUENTIAL", agents=[AgentConfig(name="a", agent=EchoAgent(), enabled=False)]),
         "no enabled agents"),
        (WorkflowSpec(pattern="PARALLEL", agents=[
            AgentConfig(name="a", agent=EchoAgent()),
            AgentConfig(name="a", agent=EchoAgent()),
        ]), "Duplicate agent names: a"),
        (WorkflowSpec(pattern="ROUTING", agents=[AgentConfig(name="a", agent=EchoAgent())]),
         "routing_agent"),
        (WorkflowSpec(pattern="SUPERVISOR", agents=[AgentConfig(name="a", agent=EchoAgent())],
                      options=WorkflowOptions(supervisor_agent=EchoAgent())),
         "supervisor_agent"),
    ])
    def test_invalid_specs(self, spec, message):
        with pytest.raises(ConfigurationError, match=message):
            ConfigurableWorkflow(spec)

    @pytest.mark.asyncio
    async def test_execute(self):
        workflow = ConfigurableWorkflow(WorkflowSpec(
            pattern=WorkflowPattern.SUPERVISOR,
            agents=[AgentConfig(name="helper", agent=EchoAgent("h:"))],
            options=WorkflowOptions(supervisor_agent=ScriptedSupervisor([("helper", "task")]), verbose=True),
        ))
        result = await workflow.execute("start")
        assert result.success
        assert result.final_result == "h:task"

    @pytest.mark.asyncio
    async def test_unexpected_error_becomes_failure(self):
        workflow = ConfigurableWorkflow(WorkflowSpec(
            pattern=WorkflowPattern.SEQUENTIAL,
            agents=[AgentConfig(name="a", agent=EchoAgent())],
        ))

        class Broken(SequentialPatternExecutor):
            async def execute(self, input, spec) -> WorkflowResult:
                raise KeyError("lost")

        workflow.executor = Broken()
        result = await workflow.execute("x")
        assert not result.success
        assert result.error_message == "Workflow execution failed: 'lost'"
        assert result.pattern == WorkflowPattern.SEQUENTIAL

    @pytest.mark.asyncio
    async def test_reusable(self):
        agent = EchoAgent(">")
        workflow = ConfigurableWorkflow(WorkflowSpec(
            pattern=WorkflowPattern.PARALLEL,
            agents=[AgentConfig(name="a", agent=agent)],
        ))
        first = await workflow.execute("one")
        second = await workflow.execute("two")
        assert first.final_result == "[a]\n>one"
        assert second.final_result == "[a]\n>two"
