"""Tests for LLMAgent.

Provider calls are replaced by patching ``LLMAgent._call`` with a scripted
coroutine, so these tests exercise the message flow and tool loop only.
"""

from typing import Any, Dict, List

import pytest

from relaygraph.core.agent import CallableAgent, ConfigurableInvoker, LLMAgent, ToolCallingInvoker, agent_as_tool
from relaygraph.core.errors import AgentInvocationError


class FakeResponse:
    """Minimal stand-in for a Mirascope call response."""

    def __init__(self, content: str = "", tools: List[Any] = None):
        self.content = content
        self.tools = tools or []

    @property
    def message_param(self) -> Dict[str, Any]:
        return {"role": "assistant", "content": self.content}

    def tool_message_params(self, tools_and_outputs) -> List[Dict[str, Any]]:
        return [
            {"role": "tool", "name": tool._name(), "content": str(output)}
            for tool, output in tools_and_outputs
        ]


def role(message: Any) -> str:
    """Role of a history entry, which may be a dict or a BaseMessageParam."""
    return message["role"] if isinstance(message, dict) else message.role


def script(monkeypatch, responses: List[FakeResponse]) -> List[Dict[str, Any]]:
    """Patch LLMAgent._call to return ``responses`` in order; returns the call log."""
    calls: List[Dict[str, Any]] = []
    queue = list(responses)

    async def fake_call(self, query: str):
        calls.append({"query": query, "history": list(self.history), "system_prompt": self.system_prompt})
        return queue.pop(0) if len(queue) > 1 else queue[0]

    monkeypatch.setattr(LLMAgent, "_call", fake_call)
    return calls


class TestLLMAgent:
    """Test suite for LLMAgent."""

    def test_protocols(self):
        """Test that LLMAgent supports options and tools."""
        agent = LLMAgent()
        assert isinstance(agent, ConfigurableInvoker)
        assert isinstance(agent, ToolCallingInvoker)

    @pytest.mark.asyncio
    async def test_plain_answer(self, monkeypatch):
        """Test a call without tools."""
        calls = script(monkeypatch, [FakeResponse("Paris")])
        agent = LLMAgent(system_prompt="Answer briefly.")

        assert await agent.invoke("Capital of France?") == "Paris"
        assert calls[0]["query"] == "Capital of France?"
        assert calls[0]["system_prompt"] == "Answer briefly."
        assert agent.history == []

    @pytest.mark.asyncio
    async def test_keep_history(self, monkeypatch):
        """Test that history is kept only when requested."""
        script(monkeypatch, [FakeResponse("first"), FakeResponse("second")])
        agent = LLMAgent(keep_history=True)

        await agent.invoke("one")
        assert [role(m) for m in agent.history] == ["user", "assistant"]
        await agent.invoke("two")
        assert len(agent.history) == 4

    @pytest.mark.asyncio
    async def test_tool_loop(self, monkeypatch):
        """Test that tool calls are executed and fed back to the model."""
        worker = CallableAgent(lambda text: f"facts about {text}")
        Research = agent_as_tool("researcher", worker, "Finds facts")
        calls = script(monkeypatch, [
            FakeResponse(tools=[Research(request="graphs")]),
            FakeResponse("Graphs are great."),
        ])

        agent = LLMAgent(tools=[Research])
        assert await agent.invoke("Tell me about graphs") == "Graphs are great."

        follow_up = calls[1]
        assert follow_up["query"] == ""
        tool_messages = [m for m in follow_up["history"] if role(m) == "tool"]
        assert tool_messages == [{"role": "tool", "name": "researcher", "content": "facts about graphs"}]

    @pytest.mark.asyncio
    async def test_tool_round_limit(self, monkeypatch):
        """Test that a model that never stops calling tools is cut off."""
        worker = CallableAgent(lambda text: "again")
        Loop = agent_as_tool("looper", worker)
        script(monkeypatch, [FakeResponse(tools=[Loop(request="x")])])

        agent = LLMAgent(name="stubborn", max_tool_rounds=2)
        with pytest.raises(AgentInvocationError, match="stubborn"):
            await agent.invoke("go")

    @pytest.mark.asyncio
    async def test_provider_errors_are_wrapped(self, monkeypatch):
        """Test that provider failures surface as AgentInvocationError."""
        async def broken_call(self, query: str):
            raise ConnectionError("network down")

        monkeypatch.setattr(LLMAgent, "_call", broken_call)
        with pytest.raises(AgentInvocationError, match="network down"):
            await LLMAgent(name="writer").invoke("hi")

    def test_with_options_copies(self):
        """Test that with_options leaves the original untouched."""
        agent = LLMAgent(system_prompt="base", temperature=0.1)
        tuned = agent.with_options(system_prompt="tuned", max_tokens=50)

        assert tuned.system_prompt == "tuned"
        assert tuned.temperature == 0.1
        assert tuned.max_tokens == 50
        assert agent.system_prompt == "base"
        assert agent.max_tokens is None

    def test_with_tools_copies(self):
        """Test that with_tools adds tools and replaces the instruction."""
        Tool = agent_as_tool("helper", CallableAgent(lambda text: text))
        agent = LLMAgent(system_prompt="base")
        team = agent.with_tools([Tool], "coordinate")

        assert team.tools == [Tool]
        assert team.system_prompt == "coordinate"
        assert agent.tools == []
