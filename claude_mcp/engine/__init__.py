"""Request-to-subprocess translation for the claude CLI."""
from .models import (
    ConversationMode,
    ConversationRequest,
    DecodedOutput,
    ExecutionOutcome,
    InterpretedResponse,
    RawTextOutput,
    StructuredOutput,
)
from .config import ServerConfig
from .errors import (
    ClaudeMcpError,
    CommandBuildError,
    ExecutionError,
    ExecutionTimeoutError,
    OutputLimitExceededError,
    ToolNotFoundError,
    UnknownToolError,
)
from .command_builder import build_argv, build_command
from .executor import CommandExecutor, ShellExecutor
from .interpreter import decode_output, interpret_output

__all__ = [
    # Models
    "ConversationMode",
    "ConversationRequest",
    "DecodedOutput",
    "ExecutionOutcome",
    "InterpretedResponse",
    "RawTextOutput",
    "StructuredOutput",
    # Config
    "ServerConfig",
    # Errors
    "ClaudeMcpError",
    "CommandBuildError",
    "ExecutionError",
    "ExecutionTimeoutError",
    "OutputLimitExceededError",
    "ToolNotFoundError",
    "UnknownToolError",
    # Core
    "build_argv",
    "build_command",
    "CommandExecutor",
    "ShellExecutor",
    "decode_output",
    "interpret_output",
]
