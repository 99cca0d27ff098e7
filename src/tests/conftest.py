"""Shared test fixtures.

Fake agents stand in for model calls so every test runs offline.
"""

import asyncio
from typing import Dict, List, Optional, Sequence

import pytest

from relaygraph.core.config import get_settings


class EchoAgent:
    """Returns ``prefix + text`` and records every input."""

    def __init__(self, prefix: str = ""):
        self.prefix = prefix
        self.calls: List[str] = []

    async def invoke(self, text: str) -> str:
        self.calls.append(text)
        return f"{self.prefix}{text}"


class FixedAgent:
    """Always answers with the same text."""

    def __init__(self, answer: str, delay: float = 0.0):
        self.answer = answer
        self.delay = delay
        self.calls: List[str] = []

    async def invoke(self, text: str) -> str:
        self.calls.append(text)
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.answer


class FailingAgent:
    """Raises on every call."""

    def __init__(self, message: str = "model unavailable"):
        self.message = message
        self.calls: List[str] = []

    async def invoke(self, text: str) -> str:
        self.calls.append(text)
        raise RuntimeError(self.message)


class OptionsAgent(EchoAgent):
    """Echo agent that also supports with_options, recording what it got."""

    def __init__(self, prefix: str = ""):
        super().__init__(prefix)
        self.options: List[Dict] = []

    def with_options(self, system_prompt=None, temperature=None, max_tokens=None):
        self.options.append({
            "system_prompt": system_prompt,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        return self


class ScriptedSupervisor:
    """Tool-calling fake: calls each tool in ``plan`` and summarises the answers.

    ``plan`` is a list of ``(tool_name, request)`` pairs. The copy returned by
    ``with_tools`` keeps the tools and instruction so tests can inspect them.
    """

    def __init__(self, plan: Optional[Sequence] = None, fail: bool = False):
        self.plan = list(plan or [])
        self.fail = fail
        self.tools: List[type] = []
        self.instruction: Optional[str] = None
        self.bound: Optional["ScriptedSupervisor"] = None

    def with_tools(self, tools, instruction=None):
        bound = ScriptedSupervisor(self.plan, self.fail)
        bound.tools = list(tools)
        bound.instruction = instruction
        self.bound = bound
        return bound

    async def invoke(self, text: str) -> str:
        if self.fail:
            raise RuntimeError("supervisor crashed")
        by_name = {tool._name(): tool for tool in self.tools}
        answers = []
        for tool_name, request in self.plan:
            answers.append(await by_name[tool_name](request=request).call())
        return " | ".join(answers) if answers else f"no help needed for {text}"


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached per process; reset around tests that patch env."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def echo_agent() -> EchoAgent:
    return EchoAgent()


@pytest.fixture
def options_agent() -> OptionsAgent:
    return OptionsAgent()
