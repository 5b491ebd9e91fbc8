"""Claude CLI provider.

Runs `claude -p ... --output-format json` through a CommandExecutor for
every turn. New conversations use the plain form; continuations use
`-r <session_id>` or, without an id, `-c` (most recent conversation).
"""
from __future__ import annotations

import dataclasses
import logging
import shutil

from ..command_builder import DEFAULT_COMMAND, build_command
from ..executor import CommandExecutor
from ..interpreter import interpret_output
from ..models import ConversationMode, ConversationRequest, InterpretedResponse
from .base import ConversationProvider

logger = logging.getLogger(__name__)


class ClaudeCliProvider(ConversationProvider):
    """Provider backed by the Claude Code CLI in print mode.

    Stateless: every call builds its own command line and owns its
    own subprocess, so concurrent calls need no coordination. Races
    between concurrent "continue latest" calls are resolved by the
    CLI's own notion of the latest conversation.
    """

    def __init__(
        self,
        executor: CommandExecutor,
        command: str = DEFAULT_COMMAND,
        default_model: str | None = None,
        default_cwd: str | None = None,
    ) -> None:
        self._executor = executor
        self._command = command
        self._default_model = default_model
        self._default_cwd = default_cwd

    @property
    def name(self) -> str:
        return "claude"

    @property
    def command(self) -> str:
        return self._command

    def _with_defaults(self, request: ConversationRequest) -> ConversationRequest:
        return dataclasses.replace(
            request,
            model=request.model or self._default_model,
            cwd=request.cwd or self._default_cwd,
        )

    async def _run(
        self,
        request: ConversationRequest,
        mode: ConversationMode,
    ) -> InterpretedResponse:
        request = self._with_defaults(request)
        command = build_command(request, mode, self._command)

        outcome = await self._executor.run(command, cwd=request.cwd)

        fallback = (
            request.continuation_id
            if mode is ConversationMode.CONTINUE
            else None
        )
        interpreted = interpret_output(outcome.stdout, fallback)
        if interpreted.is_error:
            logger.warning(
                "Claude reported an error (session_id=%s): %s",
                interpreted.session_id,
                interpreted.response[:200],
            )
        return interpreted

    async def start_conversation(
        self,
        request: ConversationRequest,
    ) -> InterpretedResponse:
        logger.info(
            "start_conversation: prompt_length=%d model=%s system_prompt=%s cwd=%s",
            len(request.prompt) if isinstance(request.prompt, str) else 0,
            request.model,
            bool(request.system_prompt),
            request.cwd,
        )
        result = await self._run(request, ConversationMode.NEW)
        logger.info(
            "start_conversation completed: session_id=%s response_length=%d",
            result.session_id, len(result.response),
        )
        return result

    async def continue_conversation(
        self,
        request: ConversationRequest,
    ) -> InterpretedResponse:
        if request.continuation_id:
            logger.info("Resuming session: %s", request.continuation_id)
        else:
            logger.info("Continuing most recent session")
        result = await self._run(request, ConversationMode.CONTINUE)
        logger.info(
            "continue_conversation completed: session_id=%s response_length=%d",
            result.session_id, len(result.response),
        )
        return result

    def is_available(self) -> bool:
        """Check if the claude CLI is installed."""
        return shutil.which(self._command) is not None
