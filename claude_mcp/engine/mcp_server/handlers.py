"""Tool-call dispatch for the chat / chat-reply MCP tools.

Transport-independent: takes a provider and a plain argument dict,
returns a ToolResult. Failed turns become error results here so the
server process never dies because one conversation failed.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from ..errors import ClaudeMcpError, UnknownToolError
from ..models import ConversationRequest
from ..providers.base import ConversationProvider

logger = logging.getLogger(__name__)

CHAT_TOOL = "chat"
CHAT_REPLY_TOOL = "chat-reply"

CHAT_DESCRIPTION = (
    "Start a new Claude session with a prompt. "
    "Returns the response and the new Session ID."
)
CHAT_REPLY_DESCRIPTION = "Continue an existing Claude session."

# Parameter descriptions shared by both tools' input schemas
PROMPT_DESCRIPTION = "The prompt to send to Claude."
SESSION_ID_DESCRIPTION = (
    "The session ID to continue. If not provided, "
    "continues the most recent session."
)
MODEL_DESCRIPTION = "Optional: The model to use (e.g., 'sonnet', 'opus', 'haiku')."
SYSTEM_PROMPT_DESCRIPTION = (
    "Optional: System prompt. Replaces the default for chat; "
    "appended to the existing one for chat-reply."
)
CWD_DESCRIPTION = "Optional: Working directory for the claude CLI execution."


@dataclass
class ToolResult:
    """Protocol-level result of one tool call."""
    text: str
    is_error: bool = False
    session_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Render in MCP CallToolResult wire shape."""
        result: dict[str, Any] = {
            "content": [{"type": "text", "text": self.text}],
        }
        if self.is_error:
            result["isError"] = True
        if self.session_id:
            result["_meta"] = {"sessionId": self.session_id}
        return result


def _request_from_args(
    args: dict[str, Any],
    *,
    with_session: bool,
) -> ConversationRequest:
    return ConversationRequest(
        prompt=args.get("prompt"),
        model=args.get("model") or None,
        system_prompt=args.get("systemPrompt") or None,
        cwd=args.get("cwd") or None,
        continuation_id=(args.get("sessionId") or None) if with_session else None,
    )


async def handle_chat(
    provider: ConversationProvider,
    args: dict[str, Any],
) -> ToolResult:
    request = _request_from_args(args, with_session=False)
    result = await provider.start_conversation(request)
    logger.info(
        "chat returning: session_id=%s response_length=%d",
        result.session_id, len(result.response),
    )
    return ToolResult(text=result.response, session_id=result.session_id)


async def handle_chat_reply(
    provider: ConversationProvider,
    args: dict[str, Any],
) -> ToolResult:
    request = _request_from_args(args, with_session=True)
    result = await provider.continue_conversation(request)
    logger.info(
        "chat-reply returning: session_id=%s response_length=%d",
        result.session_id, len(result.response),
    )
    return ToolResult(text=result.response, session_id=result.session_id)


_HANDLERS: dict[
    str,
    Callable[[ConversationProvider, dict[str, Any]], Awaitable[ToolResult]],
] = {
    CHAT_TOOL: handle_chat,
    CHAT_REPLY_TOOL: handle_chat_reply,
}


async def handle_tool_call(
    provider: ConversationProvider,
    name: str,
    args: dict[str, Any],
) -> ToolResult:
    """Dispatch a tool call by name.

    Build and execution failures come back as an error ToolResult.
    A tool-reported error (is_error in the CLI output) is returned as
    ordinary text. Unknown tool names raise UnknownToolError.
    """
    logger.info("handle_tool_call: %s (args: %s)", name, sorted(args))
    handler = _HANDLERS.get(name)
    if handler is None:
        logger.error("Unknown tool: %s", name)
        raise UnknownToolError(name, sorted(_HANDLERS))

    try:
        return await handler(provider, args)
    except ClaudeMcpError as exc:
        logger.error("handle_tool_call error in %s: %s", name, exc)
        return ToolResult(
            text=f"Error executing claude: {exc}",
            is_error=True,
        )
