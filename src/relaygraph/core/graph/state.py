"""State management for the graph system.

This module provides:
1. MergeStrategy: How a node's update to a key is combined with the old value
2. StateStore: The per-execution key/value store nodes read from and write to

A StateStore is created for exactly one graph execution and is never shared.
Strategies are fixed when the graph is built; keys the graph does not declare
behave as REPLACE.
"""

from typing import Dict, Any, Mapping, Optional
from datetime import datetime, timezone
from enum import Enum
from pydantic import BaseModel, Field

NEXT_NODE_KEY = "next_node"
CURRENT_NODE_KEY = "current_node"
ERROR_MESSAGE_KEY = "error_message"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def route_key(value: Any) -> str:
    """State value as a routing table key.

    Booleans use JSON spelling ('true', 'false') to match route tables
    written in graph JSON.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class MergeStrategy(str, Enum):
    """Merge policy bound to a state key."""
    REPLACE = "replace"
    APPEND = "append"


class StateStore(BaseModel):
    """
    Key/value state for a single graph execution.

    Attributes:
        strategies: Merge strategy per declared key
        data: Current values
        created_at: Time of state creation
        updated_at: Time of last state modification
    """
    strategies: Dict[str, MergeStrategy] = Field(default_factory=dict)
    data: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

    def strategy_for(self, key: str) -> MergeStrategy:
        return self.strategies.get(key, MergeStrategy.REPLACE)

    def merge(self, update: Optional[Mapping[str, Any]]) -> None:
        """Merge a partial update into the state.

        REPLACE keys are overwritten. APPEND keys accumulate into a list:
        a list or tuple value extends it, anything else is appended as one
        element.
        """
        if not update:
            return
        for key, value in update.items():
            if self.strategy_for(key) == MergeStrategy.APPEND:
                values = self.data.setdefault(key, [])
                if not isinstance(values, list):
                    values = [values]
                    self.data[key] = values
                if isinstance(value, (list, tuple)):
                    values.extend(value)
                else:
                    values.append(value)
            else:
                self.data[key] = value
        self._update_timestamp()

    def get(self, key: str, default: Any = None) -> Any:
        """Get value from state."""
        return self.data.get(key, default)

    def __contains__(self, key: str) -> bool:
        return key in self.data

    def snapshot(self) -> Dict[str, Any]:
        """Plain copy of the current values. Append lists are copied too."""
        return {
            key: list(value) if isinstance(value, list) else value
            for key, value in self.data.items()
        }

    def _update_timestamp(self) -> None:
        """Update the last modified timestamp."""
        object.__setattr__(self, "updated_at", _now())
