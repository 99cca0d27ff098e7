"""Results returned by the collaboration patterns."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from relaygraph.core.patterns.spec import WorkflowPattern


class AgentStepResult(BaseModel):
    """One agent call made while running a pattern."""
    agent_name: str
    input: str
    output: Optional[str] = None
    duration_ms: int = 0
    success: bool = True
    error_message: Optional[str] = None


class WorkflowResult(BaseModel):
    """
    Outcome of a pattern run. Expected failures are reported here, never raised.

    Attributes:
        success: False if the pattern, or any parallel agent, failed
        final_result: The answer of the workflow, when there is one
        error_message: What went wrong
        agent_results: Agent steps in the order they were recorded
        duration_ms: Wall time of the whole run
        pattern: Pattern that produced this result
        metadata: Pattern-specific details such as the routing decision
    """
    success: bool
    final_result: Optional[str] = None
    error_message: Optional[str] = None
    agent_results: List[AgentStepResult] = Field(default_factory=list)
    duration_ms: int = 0
    pattern: Optional[WorkflowPattern] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def failure(
        cls,
        message: str,
        pattern: Optional[WorkflowPattern] = None,
        agent_results: Optional[List[AgentStepResult]] = None,
        duration_ms: int = 0,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "WorkflowResult":
        return cls(
            success=False,
            error_message=message,
            agent_results=agent_results or [],
            duration_ms=duration_ms,
            pattern=pattern,
            metadata=metadata or {},
        )

    def step(self, agent_name: str) -> Optional[AgentStepResult]:
        """First recorded step of ``agent_name``."""
        for step in self.agent_results:
            if step.agent_name == agent_name:
                return step
        return None

    def steps(self, agent_name: str) -> List[AgentStepResult]:
        return [step for step in self.agent_results if step.agent_name == agent_name]
