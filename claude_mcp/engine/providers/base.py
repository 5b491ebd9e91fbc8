"""Abstract base for conversation providers.

A provider turns a ConversationRequest into an InterpretedResponse by
driving some external conversational CLI. The MCP dispatch layer only
talks to this interface, so the CLI behind it can be swapped or
mocked without touching call sites.
"""
from __future__ import annotations

import abc

from ..models import ConversationRequest, InterpretedResponse


class ConversationProvider(abc.ABC):
    """Abstract provider interface."""

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Short provider name (e.g. 'claude')."""

    @abc.abstractmethod
    async def start_conversation(
        self,
        request: ConversationRequest,
    ) -> InterpretedResponse:
        """Start a brand-new conversation.

        Any continuation_id on the request is ignored.
        """

    @abc.abstractmethod
    async def continue_conversation(
        self,
        request: ConversationRequest,
    ) -> InterpretedResponse:
        """Continue an existing conversation.

        If request.continuation_id is None, continues whichever
        conversation the CLI considers most recent. The returned
        session_id falls back to the requested one when the CLI
        does not report its own.
        """

    @abc.abstractmethod
    def is_available(self) -> bool:
        """Check if this provider's CLI is installed."""
