"""Logging Configuration with pretty formatting for relaygraph."""

import logging
from typing import Optional, Dict, Any
from enum import Enum, IntEnum
from datetime import datetime
from pydantic import BaseModel, Field

# ANSI Color Codes
class Colors:
    """ANSI color codes for pretty terminal output."""
    HEADER = '\033[95m'      # Pink
    INFO = '\033[94m'        # Blue
    SUCCESS = '\033[92m'     # Green
    WARNING = '\033[93m'     # Yellow
    ERROR = '\033[91m'       # Red
    RESET = '\033[0m'        # Reset
    BOLD = '\033[1m'         # Bold
    DIM = '\033[2m'          # Dim

# Pretty format strings
PRETTY_FORMAT = (
    "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
)

DETAILED_FORMAT = (
    f"{Colors.DIM}%(asctime)s{Colors.RESET} │ "
    f"%(colored_level)-30s │ "
    f"{Colors.DIM}%(name)s{Colors.RESET} │ "
    f"%(message)s"
)

class PrettyFormatter(logging.Formatter):
    """Custom formatter with colors and symbols."""

    level_colors = {
        'DEBUG': (Colors.DIM, '·'),
        'VERBOSE': (Colors.DIM, '…'),
        'INFO': (Colors.INFO, 'i'),
        'WARNING': (Colors.WARNING, '!'),
        'ERROR': (Colors.ERROR, 'x'),
        'CRITICAL': (Colors.ERROR + Colors.BOLD, '!!'),
        'AGENT': (Colors.SUCCESS, '>'),
        'TOOL': (Colors.HEADER, '#'),
    }

    def format(self, record):
        color, symbol = self.level_colors.get(record.levelname, (Colors.RESET, '•'))
        record.colored_level = f"{color}{symbol} {record.levelname}{Colors.RESET}"

        message = super().format(record)

        # Separator line for errors and warnings
        if record.levelno >= logging.WARNING:
            message = f"{message}\n{Colors.DIM}{'─' * 80}{Colors.RESET}"

        return message

class PrettyLogHandler(logging.StreamHandler):
    """Handler that adds pretty formatting to log records."""

    def emit(self, record):
        try:
            record.asctime = datetime.fromtimestamp(record.created).strftime('%H:%M:%S')
            self.stream.write(self.format(record) + self.terminator)
            self.flush()
        except Exception:
            self.handleError(record)

class LogComponent(str, Enum):
    """Components that can be logged."""
    AGENT = "relaygraph.core.agent"
    TOOLS = "relaygraph.core.agent.tools"
    GRAPH = "relaygraph.core.graph"
    NODES = "relaygraph.core.graph.nodes"
    PATTERNS = "relaygraph.core.patterns"
    WORKFLOW = "relaygraph.core.patterns.workflow"

class LogLevel(IntEnum):
    """Log levels mapped to logging module levels."""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL
    AGENT = 25  # Custom level for agent outputs
    TOOL = 26   # Custom level for tool calls

class VerbosityLevel(IntEnum):
    """Custom verbosity levels for more granular control."""
    DEBUG = logging.DEBUG
    VERBOSE = 15  # Custom lower-than-INFO level
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

# Register custom log levels
logging.addLevelName(LogLevel.AGENT, "AGENT")
logging.addLevelName(LogLevel.TOOL, "TOOL")
logging.addLevelName(VerbosityLevel.VERBOSE, "VERBOSE")

class RelayLoggingConfig(BaseModel):
    """Configuration for logging behavior."""
    level: VerbosityLevel = Field(default=VerbosityLevel.INFO)
    show_llm_messages: bool = Field(default=True)
    show_tool_calls: bool = Field(default=True)
    show_node_transitions: bool = Field(default=False)

def configure_logging(
    default_level: LogLevel = LogLevel.INFO,
    component_levels: Optional[Dict[LogComponent, LogLevel]] = None,
    pretty: bool = True,
    log_file: Optional[str] = None
) -> None:
    """Configure logging with pretty formatting.

    Replaces the handlers on the root logger, so call it once from the
    application entry point rather than from library code.

    Args:
        default_level: Level applied to the root logger
        component_levels: Per-component overrides
        pretty: Use colored console output
        log_file: Optional file that receives uncolored output
    """
    handlers = []

    console_handler = PrettyLogHandler() if pretty else logging.StreamHandler()
    console_handler.setFormatter(
        PrettyFormatter(DETAILED_FORMAT) if pretty else logging.Formatter(PRETTY_FORMAT)
    )
    handlers.append(console_handler)

    # File handler if specified (without colors)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(PRETTY_FORMAT))
        handlers.append(file_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(default_level.value)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    for handler in handlers:
        root_logger.addHandler(handler)

    if not component_levels:
        component_levels = {
            LogComponent.AGENT: LogLevel.AGENT,
            LogComponent.TOOLS: LogLevel.TOOL,
            LogComponent.GRAPH: LogLevel.INFO,
            LogComponent.NODES: LogLevel.INFO,
            LogComponent.PATTERNS: LogLevel.INFO,
        }

    for component, level in component_levels.items():
        logging.getLogger(component.value).setLevel(level.value)

def get_logger(component: LogComponent) -> logging.Logger:
    """Get a logger for a specific component."""
    logger = logging.getLogger(component.value)

    # Convenience methods for agent and tool logging
    def log_agent(self, msg: str) -> None:
        self.log(LogLevel.AGENT, f"{Colors.SUCCESS}{msg}{Colors.RESET}")

    def log_tool(self, msg: str) -> None:
        self.log(LogLevel.TOOL, f"{Colors.HEADER}{msg}{Colors.RESET}")

    logger.agent = lambda msg: log_agent(logger, msg)
    logger.tool = lambda msg: log_tool(logger, msg)

    return logger

def log_verbose(logger: logging.Logger, message: str) -> None:
    """Log a message at VERBOSE level."""
    if logger.isEnabledFor(VerbosityLevel.VERBOSE):
        logger.log(VerbosityLevel.VERBOSE, message)

def log_state(logger: logging.Logger, state: Dict[str, Any], prefix: str = "") -> None:
    """Log a state dictionary in a readable format."""
    for key, value in state.items():
        if isinstance(value, dict):
            logger.debug(f"{prefix}{key}:")
            log_state(logger, value, prefix + "  ")
        else:
            logger.debug(f"{prefix}{key}: {value}")

def truncate(text: Optional[str], limit: int = 100) -> str:
    """Shorten text for log lines."""
    if text is None:
        return ""
    return text if len(text) <= limit else text[:limit] + "..."
