"""
Agent invocation boundary.

Everything in relaygraph talks to models through one capability:

    async def invoke(self, text: str) -> str

This module defines that protocol and two implementations:
 - CallableAgent wraps any sync or async callable (handy for tests and for
   agents built with other libraries)
 - LLMAgent is a provider-agnostic Mirascope agent with a tool-calling loop,
   used by the supervisor pattern

Message Flow (LLMAgent):
    1. System prompt, conversation history and the user query are sent to
       the model
    2. If the response has no tool calls, its content is returned
    3. Otherwise each tool is executed, the results are added to the
       conversation and the model is called again
    4. The loop stops after ``max_tool_rounds`` tool rounds with an
       AgentInvocationError

Example:
    ```python
    agent = LLMAgent(name="writer", system_prompt="You write short reports.")
    text = await agent.invoke("Summarise the quarterly numbers")
    ```
"""

import asyncio
import inspect
from typing import List, Any, Optional, Callable, Sequence, Protocol, runtime_checkable
from pydantic import BaseModel, Field
from tenacity import retry, stop_after_attempt, wait_exponential
from mirascope.core import (
    BaseMessageParam,
    BaseTool,
    BaseDynamicConfig,
    openai,
)

from relaygraph.core.config import get_settings
from relaygraph.core.errors import AgentInvocationError
from relaygraph.core.logging import (
    LogComponent,
    RelayLoggingConfig,
    VerbosityLevel,
    get_logger,
    log_verbose,
    truncate,
)

logger = get_logger(LogComponent.AGENT)


@runtime_checkable
class AgentInvoker(Protocol):
    """Anything that turns input text into model output text."""

    async def invoke(self, text: str) -> str:
        ...


@runtime_checkable
class ConfigurableInvoker(AgentInvoker, Protocol):
    """An invoker that accepts a system prompt and sampling parameters."""

    def with_options(
        self,
        system_prompt: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> AgentInvoker:
        ...


@runtime_checkable
class ToolCallingInvoker(AgentInvoker, Protocol):
    """An invoker that can be handed tools and reason over them on its own."""

    def with_tools(
        self,
        tools: Sequence[type[BaseTool]],
        instruction: Optional[str] = None,
    ) -> AgentInvoker:
        ...


class CallableAgent(BaseModel):
    """Adapts a plain function to the AgentInvoker protocol.

    Synchronous functions run in a worker thread so that a caller-side
    timeout stops the wait even though the function itself keeps running.

    Attributes:
        fn: ``fn(text)`` returning text, sync or async
        name: Optional name used in log lines
    """
    fn: Callable[[str], Any]
    name: Optional[str] = None

    class Config:
        arbitrary_types_allowed = True

    def __init__(self, fn: Optional[Callable[[str], Any]] = None, **data):
        if fn is not None:
            data["fn"] = fn
        super().__init__(**data)

    async def invoke(self, text: str) -> str:
        if inspect.iscoroutinefunction(self.fn):
            result = await self.fn(text)
        else:
            result = await asyncio.to_thread(self.fn, text)
            if inspect.isawaitable(result):
                result = await result
        return "" if result is None else str(result)


def as_invoker(agent: Any) -> AgentInvoker:
    """Return ``agent`` as an AgentInvoker, wrapping bare callables.

    Raises:
        TypeError: If ``agent`` is neither an invoker nor callable
    """
    if isinstance(agent, AgentInvoker):
        return agent
    if callable(agent):
        return CallableAgent(fn=agent)
    raise TypeError(f"Expected an object with invoke(text) or a callable, got {type(agent).__name__}")


class LLMAgent(BaseModel):
    """Mirascope agent with optional tools.

    Each ``invoke`` runs on a private copy of the conversation, so a single
    LLMAgent can serve concurrent graph executions. Set ``keep_history`` to
    carry the conversation over between calls.

    Attributes:
        name: Agent name, also used as tool name when delegated to
        description: Capability hint for routing and supervision
        system_prompt: System message sent with every call
        tools: Tool classes (not instances) available to the model
        temperature: Optional sampling temperature
        max_tokens: Optional completion limit
        max_tool_rounds: Tool rounds allowed before giving up
        keep_history: Keep the conversation between invocations
        history: Conversation messages
        logging_config: Controls the verbosity of agent logs
    """
    name: str = "assistant"
    description: Optional[str] = None
    system_prompt: Optional[str] = None
    tools: List[type[BaseTool]] = Field(
        default_factory=list,
        description="List of tool classes available to the agent"
    )
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    max_tool_rounds: int = Field(default_factory=lambda: get_settings().max_tool_rounds, gt=0)
    keep_history: bool = False
    history: List[Any] = Field(
        default_factory=list,
        description="Conversation history"
    )
    logging_config: RelayLoggingConfig = Field(
        default_factory=RelayLoggingConfig,
        description="Controls the verbosity and detail of agent logs."
    )

    @retry(
        stop=stop_after_attempt(get_settings().retry_attempts),
        wait=wait_exponential(multiplier=1, min=4, max=10),
        reraise=True,
    )
    @openai.call(get_settings().model)
    async def _call(self, query: str) -> BaseDynamicConfig:
        """Make a provider call with the current conversation state.

        Args:
            query: The current user input, or empty string for follow-up calls

        Returns:
            BaseDynamicConfig: Contains messages, tools and call parameters
        """
        messages = []
        if self.system_prompt:
            messages.append(BaseMessageParam(role="system", content=self.system_prompt))
        messages.extend(self.history)
        if query:
            messages.append(BaseMessageParam(role="user", content=query))

        config = {
            "messages": messages,
            "tools": self.tools,
        }

        call_params = {}
        if self.temperature is not None:
            call_params["temperature"] = self.temperature
        if self.max_tokens is not None:
            call_params["max_tokens"] = self.max_tokens
        if call_params:
            config["call_params"] = call_params

        return config

    def _show_messages(self) -> bool:
        return self.logging_config.show_llm_messages or \
            self.logging_config.level <= VerbosityLevel.DEBUG

    async def _step(self, query: str) -> str:
        """Run one user turn, executing tool calls until the model answers.

        Args:
            query: User input

        Returns:
            The final text content of the model

        Raises:
            AgentInvocationError: If the model keeps calling tools past
                ``max_tool_rounds``
        """
        response = await self._call(query)
        if query:
            self.history.append(BaseMessageParam(role="user", content=query))
        self.history.append(response.message_param)

        rounds = 0
        while tools := response.tools:
            rounds += 1
            if rounds > self.max_tool_rounds:
                raise AgentInvocationError(
                    f"still calling tools after {self.max_tool_rounds} rounds",
                    agent_name=self.name,
                )

            if self.logging_config.show_tool_calls:
                log_verbose(logger, f"Tools to call: {[tool._name() for tool in tools]}")

            tools_and_outputs = []
            for tool in tools:
                logger.info(f"[{self.name}] calling tool '{tool._name()}'")
                if inspect.iscoroutinefunction(tool.call):
                    result = await tool.call()
                else:
                    result = tool.call()
                logger.debug(f"Tool result: {truncate(str(result), 200)}")
                tools_and_outputs.append((tool, result))

            self.history.extend(response.tool_message_params(tools_and_outputs))
            response = await self._call("")
            self.history.append(response.message_param)

        if self._show_messages():
            log_verbose(logger, f"[{self.name}] response: {truncate(response.content, 200)}")
        return response.content or ""

    async def invoke(self, text: str) -> str:
        """Send ``text`` to the model and return its final answer."""
        conversation = self.model_copy(update={"history": list(self.history)})
        try:
            output = await conversation._step(text)
        except AgentInvocationError:
            raise
        except Exception as e:
            raise AgentInvocationError(str(e), agent_name=self.name) from e
        if self.keep_history:
            self.history = conversation.history
        return output

    def with_options(
        self,
        system_prompt: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> "LLMAgent":
        """Copy of this agent with a different prompt or sampling settings."""
        update = {
            key: value
            for key, value in (
                ("system_prompt", system_prompt),
                ("temperature", temperature),
                ("max_tokens", max_tokens),
            )
            if value is not None
        }
        return self.model_copy(update=update)

    def with_tools(
        self,
        tools: Sequence[type[BaseTool]],
        instruction: Optional[str] = None,
    ) -> "LLMAgent":
        """Copy of this agent that can also call ``tools``."""
        return self.model_copy(update={
            "tools": [*self.tools, *tools],
            "system_prompt": instruction or self.system_prompt,
            "history": [],
        })
