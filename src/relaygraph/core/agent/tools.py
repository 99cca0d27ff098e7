"""Expose agents as Mirascope tools.

The supervisor pattern hands its workers to a tool-calling agent. Each worker
becomes its own BaseTool subclass named after the worker and documented with
its description, so the model sees one tool per worker with a single
``request`` argument.

Example:
    ```python
    ResearchTool = agent_as_tool("researcher", research_agent, "Finds facts")
    tool = ResearchTool(request="Who maintains CPython?")
    answer = await tool.call()
    ```
"""

import re
import time
from typing import Callable, ClassVar, Optional

from mirascope.core import BaseTool
from pydantic import BaseModel, Field

from relaygraph.core.agent.base import AgentInvoker
from relaygraph.core.logging import LogComponent, get_logger, truncate

logger = get_logger(LogComponent.TOOLS)


class ToolCallRecord(BaseModel):
    """One delegated call, reported to the tool's recorder."""
    agent_name: str
    request: str
    output: str = ""
    duration_ms: int = 0
    success: bool = True
    error_message: Optional[str] = None


class AgentTool(BaseTool):
    """Delegate a request to another agent and return its answer.

    Subclasses are created by ``agent_as_tool``; the worker and the recorder
    are class attributes so the model only has to fill in ``request``.

    Attributes:
        request: The task or question for the worker
    """

    request: str = Field(
        ...,
        description="The complete task or question to hand to this agent"
    )

    agent: ClassVar[Optional[AgentInvoker]] = None
    agent_name: ClassVar[str] = ""
    recorder: ClassVar[Optional[Callable[[ToolCallRecord], None]]] = None

    def _record(self, record: ToolCallRecord) -> None:
        recorder = type(self).recorder
        if recorder is not None:
            recorder(record)

    async def call(self) -> str:
        """Invoke the worker.

        Returns:
            str: The worker's answer, or an error message if the worker fails
        """
        cls = type(self)
        if cls.agent is None:
            return f"Error: no agent bound to tool {cls.__name__}"

        logger.tool(f"-> {cls.agent_name}: {truncate(self.request)}")
        start = time.perf_counter()
        try:
            output = await cls.agent.invoke(self.request)
        except Exception as e:
            duration_ms = int((time.perf_counter() - start) * 1000)
            logger.error(f"Worker '{cls.agent_name}' failed: {e}")
            self._record(ToolCallRecord(
                agent_name=cls.agent_name,
                request=self.request,
                duration_ms=duration_ms,
                success=False,
                error_message=str(e),
            ))
            return f"Error: {str(e)}"

        duration_ms = int((time.perf_counter() - start) * 1000)
        logger.tool(f"<- {cls.agent_name}: {truncate(output)}")
        self._record(ToolCallRecord(
            agent_name=cls.agent_name,
            request=self.request,
            output=output,
            duration_ms=duration_ms,
        ))
        return output


def tool_name(name: str) -> str:
    """Provider-safe tool name: letters, digits, underscore and dash only."""
    cleaned = re.sub(r"[^A-Za-z0-9_-]+", "_", name.strip()).strip("_")
    return cleaned or "agent"


def agent_as_tool(
    name: str,
    agent: AgentInvoker,
    description: Optional[str] = None,
    recorder: Optional[Callable[[ToolCallRecord], None]] = None,
) -> type[AgentTool]:
    """Create an AgentTool subclass bound to ``agent``.

    Args:
        name: Worker name; also the tool name after sanitising
        agent: The worker
        description: Shown to the model as the tool description
        recorder: Called with a ToolCallRecord after every call

    Returns:
        The new tool class
    """
    return type(
        tool_name(name),
        (AgentTool,),
        {
            "__doc__": description or f"Ask the {name} agent to handle a task.",
            "__module__": __name__,
            "agent": agent,
            "agent_name": name,
            "recorder": staticmethod(recorder) if recorder is not None else None,
        },
    )
