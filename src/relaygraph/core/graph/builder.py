"""Compile GraphSpecs into executable graphs.

GraphBuilder checks the whole spec before it creates anything, so every
configuration problem is reported as a ConfigurationError at build time and
no node ever runs against a broken graph.

Example:
    ```python
    builder = GraphBuilder(agent)
    graph = builder.build(GraphSpec.model_validate(config_json))
    state = await graph.run({"question": "..."})
    ```
"""

from typing import Any, Dict, List, Optional

from relaygraph.core.agent.base import AgentInvoker, as_invoker
from relaygraph.core.errors import ConfigurationError
from relaygraph.core.graph.base import ConditionalEdge, DirectEdge, Edge, Graph
from relaygraph.core.graph.nodes import get_node_executor, registered_node_types
from relaygraph.core.graph.spec import END, START, EdgeKind, GraphSpec
from relaygraph.core.graph.state import MergeStrategy, NEXT_NODE_KEY
from relaygraph.core.logging import LogComponent, RelayLoggingConfig, get_logger

logger = get_logger(LogComponent.GRAPH)

RESERVED_IDS = (START, END)


class GraphBuilder:
    """Builds graphs that call one agent.

    Args:
        agent: AgentInvoker used by every LLM node, or a plain callable
        logging_config: Passed on to built graphs
    """

    def __init__(self, agent: Any, logging_config: Optional[RelayLoggingConfig] = None):
        self.agent: AgentInvoker = as_invoker(agent)
        self.logging_config = logging_config or RelayLoggingConfig()

    @staticmethod
    def registered_node_types() -> Dict[str, str]:
        """Type code -> description of every node type the builder knows."""
        return registered_node_types()

    def validate(self, spec: GraphSpec) -> Dict[str, MergeStrategy]:
        """Check the structure of ``spec``.

        Returns:
            Merge strategy per state key, with ``next_node`` added as
            REPLACE when the spec does not declare it

        Raises:
            ConfigurationError: Listing every problem found
        """
        errors = self._structure_errors(spec)
        if errors:
            raise ConfigurationError(
                f"Invalid graph '{spec.name}': " + "; ".join(errors)
            )

        strategies = {
            item.key: MergeStrategy.APPEND if item.append else MergeStrategy.REPLACE
            for item in spec.state_keys
        }
        strategies.setdefault(NEXT_NODE_KEY, MergeStrategy.REPLACE)
        return strategies

    def _structure_errors(self, spec: GraphSpec) -> List[str]:
        errors: List[str] = []

        if not spec.name.strip():
            errors.append("graph name is empty")
        if not spec.nodes:
            errors.append("graph has no nodes")
        if not spec.edges:
            errors.append("graph has no edges")

        node_ids = set()
        for node in spec.nodes:
            if node.id in RESERVED_IDS:
                errors.append(f"node id '{node.id}' is reserved")
            elif node.id in node_ids:
                errors.append(f"duplicate node id '{node.id}'")
            node_ids.add(node.id)

        known = node_ids | set(RESERVED_IDS)
        outgoing: Dict[str, int] = {}
        for edge in spec.edges:
            label = f"edge {edge.from_} -> {edge.to or '?'}"
            if edge.from_ not in known:
                errors.append(f"{label} starts at unknown node '{edge.from_}'")
            if edge.from_ == END:
                errors.append(f"{label} leaves END")
            for target in edge.targets():
                if target not in known:
                    errors.append(f"{label} references unknown node '{target}'")
                elif target == START:
                    errors.append(f"{label} leads into START")

            if edge.kind == EdgeKind.CONDITIONAL:
                if not edge.routes:
                    errors.append(f"conditional {label} has no routes")
            else:
                if edge.to is None:
                    errors.append(f"simple edge from {edge.from_} has no target")
                if edge.routes or edge.default_route is not None:
                    errors.append(f"simple {label} must not define routes")

            outgoing[edge.from_] = outgoing.get(edge.from_, 0) + 1

        start_edges = outgoing.get(START, 0)
        if start_edges != 1:
            errors.append(f"expected exactly one edge from START, found {start_edges}")

        for node_id in sorted(node_ids - set(RESERVED_IDS)):
            count = outgoing.get(node_id, 0)
            if count == 0:
                errors.append(f"node '{node_id}' has no outgoing edge")
            elif count > 1:
                errors.append(f"node '{node_id}' has {count} outgoing edges")

        return errors

    def build(self, spec: GraphSpec) -> Graph:
        """Validate ``spec`` and compile it into a Graph.

        Raises:
            ConfigurationError: For structural problems, unknown node types
                or missing node configuration
        """
        strategies = self.validate(spec)

        actions = {}
        for node in spec.nodes:
            executor = get_node_executor(node.type)
            if executor is None:
                raise ConfigurationError(
                    f"Unknown node type '{node.type}' for node '{node.id}'. "
                    f"Known types: {', '.join(sorted(registered_node_types()))}"
                )
            executor.validate_config(node)
            actions[node.id] = executor.create_action(node, self.agent)

        edges: Dict[str, Edge] = {}
        for edge in spec.edges:
            if edge.kind == EdgeKind.CONDITIONAL:
                edges[edge.from_] = ConditionalEdge(
                    routes=dict(edge.routes),
                    default_route=edge.default_route,
                )
            else:
                edges[edge.from_] = DirectEdge(target=edge.to)

        logger.info(
            f"Built graph '{spec.name}' with {len(actions)} nodes and {len(edges)} edges"
        )
        return Graph(
            spec=spec,
            strategies=strategies,
            actions=actions,
            edges=edges,
            logging_config=self.logging_config,
        )
