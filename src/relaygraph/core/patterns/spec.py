"""Workflow specification for the collaboration patterns.

A WorkflowSpec names one pattern, the agents taking part and the options
the pattern reads. Agents are bound objects, so specs are usually built in
code; ``WorkflowSpec.from_dict`` accepts the stored JSON shape::

    {
        "pattern": "PARALLEL",
        "agents": [{"name": "analyst", "description": "...", "enabled": true}],
        "options": {"perAgentTimeout": 30, "mergeInstruction": "..."}
    }

and binds agents to it by name.
"""

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from relaygraph.core.agent.base import as_invoker
from relaygraph.core.config import get_settings
from relaygraph.core.errors import ConfigurationError


class WorkflowPattern(str, Enum):
    """Built-in collaboration strategies."""
    SEQUENTIAL = "SEQUENTIAL"
    PARALLEL = "PARALLEL"
    ROUTING = "ROUTING"
    SUPERVISOR = "SUPERVISOR"


class _WorkflowModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, arbitrary_types_allowed=True)


class AgentConfig(_WorkflowModel):
    """
    One participating agent.

    Attributes:
        name: Unique name, used in results, routing and as tool name
        description: Capability hint for routing and supervision
        enabled: Disabled agents are skipped by every pattern
        agent: AgentInvoker, or a callable wrapped into a CallableAgent
    """
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    enabled: bool = True
    agent: Any

    @field_validator("agent", mode="before")
    @classmethod
    def _wrap_agent(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("agent is required")
        return as_invoker(value)


class WorkflowOptions(_WorkflowModel):
    """
    Pattern options.

    Attributes:
        chain_output: Sequential feeds each output into the next agent
        per_agent_timeout: Parallel timeout per agent, in seconds
        merge_instruction: Parallel merge prompt, used with merge_agent
        merge_agent: Agent that merges parallel outputs
        routing_instruction: Custom routing prompt
        routing_agent: Agent that picks the route
        supervisor_agent: Tool-calling agent that coordinates workers
        supervisor_instruction: Custom supervisor system prompt
        supervisor_name: Name of the supervisor in results
        verbose: Log every agent step
        name: Workflow name for logs
        description: Workflow description
    """
    chain_output: bool = Field(default=True, alias="chainOutput")
    per_agent_timeout: float = Field(
        default_factory=lambda: get_settings().agent_timeout,
        gt=0,
        alias="perAgentTimeout",
    )
    merge_instruction: Optional[str] = Field(default=None, alias="mergeInstruction")
    merge_agent: Optional[Any] = Field(default=None, alias="mergeAgent")
    routing_instruction: Optional[str] = Field(default=None, alias="routingInstruction")
    routing_agent: Optional[Any] = Field(default=None, alias="routingAgent")
    supervisor_agent: Optional[Any] = Field(default=None, alias="supervisorAgent")
    supervisor_instruction: Optional[str] = Field(default=None, alias="supervisorInstruction")
    supervisor_name: str = Field(default="supervisor", alias="supervisorName")
    verbose: bool = False
    name: Optional[str] = None
    description: Optional[str] = None

    @field_validator("merge_agent", "routing_agent", "supervisor_agent", mode="before")
    @classmethod
    def _wrap_agents(cls, value: Any) -> Any:
        return None if value is None else as_invoker(value)


class WorkflowSpec(_WorkflowModel):
    """Pattern, agents and options of one workflow."""
    pattern: WorkflowPattern
    agents: List[AgentConfig] = Field(default_factory=list)
    options: WorkflowOptions = Field(default_factory=WorkflowOptions)

    @field_validator("pattern", mode="before")
    @classmethod
    def _normalise_pattern(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value

    def enabled_agents(self) -> List[AgentConfig]:
        return [agent for agent in self.agents if agent.enabled]

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        agents: Mapping[str, Any],
        **bound_options: Any,
    ) -> "WorkflowSpec":
        """Build a spec from stored configuration.

        Args:
            data: ``{pattern, agents: [{name, description, enabled}], options}``
            agents: Agent objects by name
            **bound_options: Option values that cannot be stored, such as
                ``merge_agent``, ``routing_agent`` or ``supervisor_agent``

        Raises:
            ConfigurationError: If a configured agent has no bound object
        """
        configs = []
        for item in data.get("agents") or []:
            name = item.get("name")
            if name not in agents:
                raise ConfigurationError(f"No agent bound for '{name}'")
            configs.append(AgentConfig(
                name=name,
                description=item.get("description"),
                enabled=item.get("enabled", True),
                agent=agents[name],
            ))

        options: Dict[str, Any] = dict(data.get("options") or {})
        options.update({key: value for key, value in bound_options.items() if value is not None})

        return cls(
            pattern=data.get("pattern"),
            agents=configs,
            options=WorkflowOptions.model_validate(options),
        )
