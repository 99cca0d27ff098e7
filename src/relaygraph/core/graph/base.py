"""Graph Base Classes

This module defines the executable graph produced by GraphBuilder.
A compiled graph is a small state machine:

    START -> entry node -> ... -> END

Each step awaits one node action, merges its partial update into the
execution's StateStore and resolves the node's single outgoing edge.
Simple edges always go to their target. Conditional edges read the
``next_node`` state key, map it through their routes and fall back to the
edge default and then to END.

Only one node runs at a time per execution. There is no step limit: a
routing table that sends execution back to an earlier node can loop
forever, so bound such graphs from the outside if needed.

Example:
    ```python
    graph = GraphBuilder(agent).build(spec)

    final_state = await graph.run({"topic": "graphs"})

    async for node_id, update in graph.stream({"topic": "graphs"}):
        print(node_id, update)
    ```
"""

from typing import Dict, Any, AsyncIterator, Mapping, Optional, Tuple, Union
import logging
from pydantic import BaseModel, Field, PrivateAttr

from relaygraph.core.errors import NodeExecutionError
from relaygraph.core.logging import (
    LogComponent,
    RelayLoggingConfig,
    VerbosityLevel,
    log_state,
    log_verbose,
    get_logger,
)
from relaygraph.core.graph.spec import GraphSpec, START, END
from relaygraph.core.graph.state import (
    MergeStrategy,
    StateStore,
    CURRENT_NODE_KEY,
    ERROR_MESSAGE_KEY,
    NEXT_NODE_KEY,
    route_key,
)
from relaygraph.core.graph.nodes.base.node import NodeAction


class DirectEdge(BaseModel):
    """Unconditional transition."""
    target: str

    def resolve(self, state: StateStore) -> str:
        return self.target


class ConditionalEdge(BaseModel):
    """Transition chosen by the ``next_node`` state value."""
    routes: Dict[str, str] = Field(default_factory=dict)
    default_route: Optional[str] = None

    def resolve(self, state: StateStore) -> str:
        fallback = self.default_route or END
        value = state.get(NEXT_NODE_KEY)
        if value is None:
            return fallback
        return self.routes.get(route_key(value), fallback)


Edge = Union[DirectEdge, ConditionalEdge]


class Graph(BaseModel):
    """A compiled, executable graph.

    Graphs hold no per-execution data, so one instance can run any number
    of executions concurrently.

    Attributes:
        spec: The spec this graph was built from
        strategies: Merge strategy per state key
        actions: Node id -> bound node action
        edges: Source id (including START) -> outgoing edge
        logging_config: Controls logging verbosity
    """
    spec: GraphSpec
    strategies: Dict[str, MergeStrategy] = Field(default_factory=dict)
    actions: Dict[str, NodeAction] = Field(default_factory=dict)
    edges: Dict[str, Edge] = Field(default_factory=dict)
    logging_config: RelayLoggingConfig = Field(
        default_factory=RelayLoggingConfig
    )
    _logger: logging.Logger = PrivateAttr()

    class Config:
        arbitrary_types_allowed = True

    def __init__(self, **data):
        super().__init__(**data)
        self._logger = get_logger(LogComponent.GRAPH)

    @property
    def name(self) -> str:
        return self.spec.name

    def new_state(self, initial_state: Optional[Mapping[str, Any]] = None) -> StateStore:
        """Fresh StateStore seeded with spec defaults, then caller values."""
        state = StateStore(strategies=dict(self.strategies))
        state.merge(self.spec.initial_state)
        state.merge(initial_state)
        return state

    async def run(self, initial_state: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Run the graph from START to END.

        Args:
            initial_state: Values merged into the new state before the first node

        Returns:
            Snapshot of the final state
        """
        state = self.new_state(initial_state)
        async for _ in self._execute(state):
            pass
        return state.snapshot()

    async def stream(
        self,
        initial_state: Optional[Mapping[str, Any]] = None
    ) -> AsyncIterator[Tuple[str, Dict[str, Any]]]:
        """Run the graph, yielding ``(node_id, update)`` after each node."""
        state = self.new_state(initial_state)
        async for step in self._execute(state):
            yield step

    async def _execute(self, state: StateStore) -> AsyncIterator[Tuple[str, Dict[str, Any]]]:
        self._logger.info(f"Starting graph '{self.name}'")
        current = self.edges[START].resolve(state)
        steps = 0

        while current != END:
            steps += 1
            update = await self._process_node(current, state)
            state.merge(update)
            yield current, update

            next_id = self.edges[current].resolve(state)
            if self.logging_config.show_node_transitions:
                log_verbose(self._logger, f"Transitioning {current} --> {next_id}")
            else:
                self._logger.debug(f"Transitioning {current} --> {next_id}")
            current = next_id

        self._logger.info(f"Graph '{self.name}' reached END after {steps} steps")
        if self.logging_config.level <= VerbosityLevel.DEBUG:
            log_state(self._logger, state.snapshot())

    async def _process_node(self, node_id: str, state: StateStore) -> Dict[str, Any]:
        """Run one node action; failures become an error_message update."""
        try:
            update = await self.actions[node_id](state)
        except Exception as e:
            error = NodeExecutionError(node_id, str(e))
            self._logger.error(str(error))
            return {ERROR_MESSAGE_KEY: str(error), CURRENT_NODE_KEY: node_id}

        if update is None:
            return {}
        if not isinstance(update, Mapping):
            error = NodeExecutionError(node_id, f"expected a mapping, got {type(update).__name__}")
            self._logger.error(str(error))
            return {ERROR_MESSAGE_KEY: str(error), CURRENT_NODE_KEY: node_id}
        return dict(update)
