"""Runtime settings for relaygraph.

Settings come from ``RELAYGRAPH_*`` environment variables. A value that
cannot be parsed or fails validation is ignored with a warning and the
default is used instead.
"""

import logging
import os
from functools import lru_cache
from typing import Any, Dict

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "RELAYGRAPH_"


class Settings(BaseModel):
    """Process-wide defaults.

    Attributes:
        model: Model name used by ``LLMAgent``
        agent_timeout: Per-agent timeout in seconds for the parallel pattern
        max_workers: Concurrency bound of a default ``AgentPool``
        max_tool_rounds: Tool-calling rounds before ``LLMAgent`` gives up
        retry_attempts: Attempts for each provider call in ``LLMAgent``
    """
    model: str = Field(default="gpt-4o-mini", min_length=1)
    agent_timeout: float = Field(default=300.0, gt=0)
    max_workers: int = Field(default=8, gt=0)
    max_tool_rounds: int = Field(default=10, gt=0)
    retry_attempts: int = Field(default=3, gt=0)

    class Config:
        validate_assignment = True


def _env_overrides() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for name, field in Settings.model_fields.items():
        raw = os.getenv(f"{ENV_PREFIX}{name.upper()}")
        if raw is None or not raw.strip():
            continue
        try:
            Settings.model_validate({name: raw.strip()})
        except ValidationError:
            logger.warning(
                f"Ignoring invalid {ENV_PREFIX}{name.upper()}={raw!r}, "
                f"using default {field.default!r}"
            )
            continue
        overrides[name] = raw.strip()
    return overrides


def load_settings() -> Settings:
    """Build settings from the environment."""
    return Settings(**_env_overrides())


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings for the current process."""
    return load_settings()
