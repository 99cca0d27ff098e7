"""Declarative graph description.

A GraphSpec is plain data: it can be written in Python or loaded from the
JSON shape used by configuration stores::

    {
        "name": "review",
        "stateKeys": [{"key": "drafts", "append": true}],
        "nodes": [{"id": "write", "type": "LLM_NODE", "config": {...}}],
        "edges": [{"from": "START", "to": "write", "kind": "simple"}, ...]
    }

Both snake_case field names and the camelCase aliases are accepted. Specs are
frozen once constructed, so one spec can back any number of concurrent
executions.
"""

from typing import Dict, Any, List, Optional
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field

START = "START"
END = "END"


class EdgeKind(str, Enum):
    """How an edge chooses its target."""
    SIMPLE = "simple"
    CONDITIONAL = "conditional"


class _SpecModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class StateKeyConfig(_SpecModel):
    """A declared state key and whether updates to it accumulate."""
    key: str = Field(..., min_length=1)
    append: bool = False


class NodeConfig(_SpecModel):
    """
    One node of the graph.

    Attributes:
        id: Unique node id, also the name edges refer to
        type: Node type code, e.g. ``LLM_NODE``
        config: Type-specific settings, checked when the graph is built
        name: Optional display name
        description: Optional description
    """
    id: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    config: Dict[str, Any] = Field(default_factory=dict)
    name: Optional[str] = None
    description: Optional[str] = None


class EdgeConfig(_SpecModel):
    """
    A transition between two nodes.

    Simple edges always go to ``to``. Conditional edges ignore ``to`` and
    map the ``next_node`` state value through ``routes``, falling back to
    ``default_route`` and then to END.
    """
    from_: str = Field(..., alias="from", min_length=1)
    to: Optional[str] = None
    kind: EdgeKind = EdgeKind.SIMPLE
    routes: Dict[str, str] = Field(default_factory=dict)
    default_route: Optional[str] = Field(default=None, alias="defaultRoute")

    def targets(self) -> List[str]:
        """Every node id this edge can lead to."""
        targets = []
        if self.to is not None:
            targets.append(self.to)
        targets.extend(self.routes.values())
        if self.default_route is not None:
            targets.append(self.default_route)
        return targets


class GraphSpec(_SpecModel):
    """
    Complete graph description.

    Attributes:
        name: Graph name, used in logs and by GraphRunner
        description: Optional description
        state_keys: Declared keys and their merge strategy
        nodes: Nodes in declaration order
        edges: Edges, exactly one of which leaves START
        initial_state: Values merged into every execution before caller input
    """
    name: str = ""
    description: Optional[str] = None
    state_keys: List[StateKeyConfig] = Field(default_factory=list, alias="stateKeys")
    nodes: List[NodeConfig] = Field(default_factory=list)
    edges: List[EdgeConfig] = Field(default_factory=list)
    initial_state: Dict[str, Any] = Field(default_factory=dict, alias="initialState")

    def node(self, node_id: str) -> Optional[NodeConfig]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None
