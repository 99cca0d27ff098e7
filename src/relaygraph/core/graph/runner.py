"""Run graphs from raw configuration and keep compiled graphs by name.

GraphRunner is the entry point for callers that hold graph configuration as
JSON (a string or an already decoded dict) rather than as a GraphSpec. It
never raises for bad input: results come back as::

    {"success": True, "data": {...final state...}}
    {"success": False, "error": "..."}
"""

from typing import Any, Dict, Mapping, Optional, Union

from pydantic import ValidationError

from relaygraph.core.errors import RelayGraphError
from relaygraph.core.graph.base import Graph
from relaygraph.core.graph.builder import GraphBuilder
from relaygraph.core.graph.spec import GraphSpec
from relaygraph.core.logging import LogComponent, get_logger

logger = get_logger(LogComponent.GRAPH)

GraphSource = Union[str, Mapping[str, Any], GraphSpec]


class GraphRunner:
    """Compiles, caches and runs graphs for one builder."""

    def __init__(self, builder: GraphBuilder):
        self.builder = builder
        self._graphs: Dict[str, Graph] = {}

    @staticmethod
    def parse(source: GraphSource) -> GraphSpec:
        """Turn JSON text, a dict or a spec into a GraphSpec."""
        if isinstance(source, GraphSpec):
            return source
        if isinstance(source, str):
            return GraphSpec.model_validate_json(source)
        return GraphSpec.model_validate(dict(source))

    def register(self, source: GraphSource) -> Graph:
        """Compile a graph and cache it under its name, replacing any older one."""
        graph = self.builder.build(self.parse(source))
        self._graphs[graph.name] = graph
        logger.info(f"Registered graph '{graph.name}'")
        return graph

    def get(self, name: str) -> Optional[Graph]:
        return self._graphs.get(name)

    def remove(self, name: str) -> bool:
        return self._graphs.pop(name, None) is not None

    @property
    def names(self):
        return sorted(self._graphs)

    def node_types(self) -> Dict[str, str]:
        return self.builder.registered_node_types()

    async def run(
        self,
        source: GraphSource,
        initial_state: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Compile ``source`` and run it once."""
        try:
            graph = self.builder.build(self.parse(source))
        except (ValidationError, ValueError, RelayGraphError) as e:
            logger.error(f"Could not build graph: {e}")
            return {"success": False, "error": str(e)}
        return await self._run_graph(graph, initial_state)

    async def run_named(
        self,
        name: str,
        initial_state: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Run a previously registered graph."""
        graph = self._graphs.get(name)
        if graph is None:
            return {"success": False, "error": f"Graph not registered: {name}"}
        return await self._run_graph(graph, initial_state)

    async def _run_graph(
        self,
        graph: Graph,
        initial_state: Optional[Mapping[str, Any]],
    ) -> Dict[str, Any]:
        try:
            data = await graph.run(initial_state)
        except Exception as e:
            logger.error(f"Graph '{graph.name}' failed: {e}")
            return {"success": False, "error": str(e)}
        logger.info(f"Graph '{graph.name}' finished with keys {sorted(data)}")
        return {"success": True, "data": data}
