"""MCP tool definitions for the Claude CLI bridge.

Exposed:
    chat        start a new Claude session
    chat-reply  continue a session by id, or the most recent one

Both return the response text as content and, when known, the
session id as ``_meta.sessionId``.
"""
from __future__ import annotations

from typing import Annotated

from mcp.server.fastmcp import Context, FastMCP
from mcp.types import CallToolResult
from pydantic import Field

from ..providers.base import ConversationProvider
from .handlers import (
    CHAT_DESCRIPTION,
    CHAT_REPLY_DESCRIPTION,
    CHAT_REPLY_TOOL,
    CHAT_TOOL,
    CWD_DESCRIPTION,
    MODEL_DESCRIPTION,
    PROMPT_DESCRIPTION,
    SESSION_ID_DESCRIPTION,
    SYSTEM_PROMPT_DESCRIPTION,
    ToolResult,
    handle_tool_call,
)


def to_call_tool_result(result: ToolResult) -> CallToolResult:
    """Convert a dispatch ToolResult into an MCP CallToolResult."""
    return CallToolResult.model_validate(result.to_dict())


def _get_provider(ctx: Context) -> ConversationProvider:
    """Get the conversation provider from lifespan context."""
    return ctx.request_context.lifespan_context["provider"]


def register_tools(mcp: FastMCP) -> None:
    """Register chat and chat-reply with the FastMCP instance."""

    @mcp.tool(
        name=CHAT_TOOL,
        description=CHAT_DESCRIPTION,
        structured_output=False,
    )
    async def chat(
        prompt: Annotated[str, Field(description=PROMPT_DESCRIPTION)],
        model: Annotated[str | None, Field(description=MODEL_DESCRIPTION)] = None,
        systemPrompt: Annotated[  # noqa: N803
            str | None, Field(description=SYSTEM_PROMPT_DESCRIPTION)
        ] = None,
        cwd: Annotated[str | None, Field(description=CWD_DESCRIPTION)] = None,
        ctx: Context = None,
    ) -> CallToolResult:
        result = await handle_tool_call(
            _get_provider(ctx),
            CHAT_TOOL,
            {
                "prompt": prompt,
                "model": model,
                "systemPrompt": systemPrompt,
                "cwd": cwd,
            },
        )
        return to_call_tool_result(result)

    @mcp.tool(
        name=CHAT_REPLY_TOOL,
        description=CHAT_REPLY_DESCRIPTION,
        structured_output=False,
    )
    async def chat_reply(
        prompt: Annotated[str, Field(description=PROMPT_DESCRIPTION)],
        sessionId: Annotated[  # noqa: N803
            str | None, Field(description=SESSION_ID_DESCRIPTION)
        ] = None,
        model: Annotated[str | None, Field(description=MODEL_DESCRIPTION)] = None,
        systemPrompt: Annotated[  # noqa: N803
            str | None, Field(description=SYSTEM_PROMPT_DESCRIPTION)
        ] = None,
        cwd: Annotated[str | None, Field(description=CWD_DESCRIPTION)] = None,
        ctx: Context = None,
    ) -> CallToolResult:
        result = await handle_tool_call(
            _get_provider(ctx),
            CHAT_REPLY_TOOL,
            {
                "prompt": prompt,
                "sessionId": sessionId,
                "model": model,
                "systemPrompt": systemPrompt,
                "cwd": cwd,
            },
        )
        return to_call_tool_result(result)
