"""Transform node: reshape state values without calling the LLM.

Operations (``transform_type``, case-insensitive):

    MERGE            join the non-empty values of all input keys with newlines
    EXTRACT          copy the first input key (None when missing)
    FORMAT           one "key: value" line per input key
    SPLIT_LINES      split the first input key into trimmed, non-empty lines
    PARSE_NUMBER     first number in the text, clamped to 0..100 (0 if none)
    PARSE_JSON       JSON object, else JSON array, else the raw text
    THRESHOLD_CHECK  "PASS" if the value reaches ``threshold`` (default 80,
                     fractions kept),
                     otherwise "NEED_IMPROVEMENT"
    INCREMENT        value + 1, counting from 0
"""

import json
import re
from enum import Enum
from typing import Dict, Any, Callable, List, Optional

from relaygraph.core.agent.base import AgentInvoker
from relaygraph.core.errors import ConfigurationError
from relaygraph.core.graph.nodes.base.node import (
    NodeExecutor,
    register_node_type,
    state_handler,
    read_text,
    logger,
)
from relaygraph.core.graph.spec import NodeConfig
from relaygraph.core.graph.state import StateStore, CURRENT_NODE_KEY

DEFAULT_THRESHOLD = 80
PASS = "PASS"
NEED_IMPROVEMENT = "NEED_IMPROVEMENT"

_NUMBER = re.compile(r"\d+")


class TransformType(str, Enum):
    MERGE = "MERGE"
    EXTRACT = "EXTRACT"
    FORMAT = "FORMAT"
    SPLIT_LINES = "SPLIT_LINES"
    PARSE_NUMBER = "PARSE_NUMBER"
    PARSE_JSON = "PARSE_JSON"
    THRESHOLD_CHECK = "THRESHOLD_CHECK"
    INCREMENT = "INCREMENT"


def _first_number(text: str) -> Optional[int]:
    match = _NUMBER.search(text)
    return int(match.group()) if match else None


def _as_int(value: Any) -> int:
    """Numbers are truncated, text yields its first number, anything else 0."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return int(value)
    if value is None:
        return 0
    return _first_number(str(value)) or 0


def merge_values(state: StateStore, keys: List[str]) -> str:
    values = (read_text(state, key) for key in keys)
    return "\n".join(value for value in values if value)


def extract_value(state: StateStore, key: str) -> Any:
    return state.get(key)


def format_values(state: StateStore, keys: List[str]) -> str:
    return "\n".join(f"{key}: {read_text(state, key)}" for key in keys).strip()


def split_lines(state: StateStore, key: str) -> List[str]:
    return [line.strip() for line in read_text(state, key).split("\n") if line.strip()]


def parse_number(state: StateStore, key: str) -> int:
    number = _first_number(read_text(state, key))
    if number is None:
        return 0
    return max(0, min(100, number))


def parse_json(state: StateStore, key: str) -> Any:
    value = state.get(key)
    text = "{}" if value is None else str(value)
    try:
        parsed = json.loads(text)
    except ValueError:
        logger.warning(f"Could not parse JSON, keeping raw text: {text[:80]}")
        return text
    if isinstance(parsed, (dict, list)):
        return parsed
    return text


def threshold_check(state: StateStore, key: str, threshold: Optional[float] = None) -> str:
    value = _as_int(state.get(key))
    limit = DEFAULT_THRESHOLD if threshold is None else float(threshold)
    logger.info(f"Threshold check: value={value}, threshold={limit}")
    return PASS if value >= limit else NEED_IMPROVEMENT


def increment_value(state: StateStore, key: str) -> int:
    value = state.get(key)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return int(value) + 1
    try:
        return int(str(value).strip()) + 1
    except ValueError:
        return 1


@register_node_type
class TransformNodeExecutor(NodeExecutor):
    """Applies one TransformType to the configured input keys."""
    node_type = "TRANSFORM_NODE"
    description = "Transform state values (merge, extract, format, parse, threshold, increment)"
    config_schema = {
        "transform_type": "One of " + ", ".join(t.value for t in TransformType) + " (required)",
        "input_keys": "State keys to read (required)",
        "output_key": "State key receiving the result (required)",
        "threshold": f"Threshold for THRESHOLD_CHECK (default {DEFAULT_THRESHOLD})",
    }
    required_keys = ["transform_type", "input_keys", "output_key"]
    error_prefix = "Transform failed"

    def validate_config(self, node: NodeConfig) -> None:
        super().validate_config(node)
        config = node.config
        try:
            TransformType(str(config["transform_type"]).upper())
        except ValueError:
            raise ConfigurationError(
                f"Node '{node.id}': unsupported transform_type '{config['transform_type']}'"
            )
        if not isinstance(config["input_keys"], list):
            raise ConfigurationError(f"Node '{node.id}': input_keys must be a list of state keys")
        threshold = config.get("threshold")
        if threshold is not None and (isinstance(threshold, bool) or not isinstance(threshold, (int, float))):
            raise ConfigurationError(f"Node '{node.id}': threshold must be a number")

    def _operation(self, node: NodeConfig) -> Callable[[StateStore], Any]:
        config = node.config
        keys = config["input_keys"]
        transform = TransformType(str(config["transform_type"]).upper())
        return {
            TransformType.MERGE: lambda state: merge_values(state, keys),
            TransformType.EXTRACT: lambda state: extract_value(state, keys[0]),
            TransformType.FORMAT: lambda state: format_values(state, keys),
            TransformType.SPLIT_LINES: lambda state: split_lines(state, keys[0]),
            TransformType.PARSE_NUMBER: lambda state: parse_number(state, keys[0]),
            TransformType.PARSE_JSON: lambda state: parse_json(state, keys[0]),
            TransformType.THRESHOLD_CHECK: lambda state: threshold_check(state, keys[0], config.get("threshold")),
            TransformType.INCREMENT: lambda state: increment_value(state, keys[0]),
        }[transform]

    @state_handler
    async def execute(self, node: NodeConfig, state: StateStore, invoker: AgentInvoker) -> Dict[str, Any]:
        result = self._operation(node)(state)
        logger.info(f"Node {node.id}: {node.config['transform_type']} -> {type(result).__name__}")
        return {
            node.config["output_key"]: result,
            CURRENT_NODE_KEY: node.id,
        }
