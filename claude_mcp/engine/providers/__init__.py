"""Provider abstraction over conversational CLIs."""
from .base import ConversationProvider
from .claude_cli_provider import ClaudeCliProvider

__all__ = [
    "ConversationProvider",
    "ClaudeCliProvider",
]
