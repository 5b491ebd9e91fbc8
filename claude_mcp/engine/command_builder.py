"""Build the claude CLI command line for a conversational turn.

Command forms:
    claude -p <prompt> --output-format json [--model M] [--system-prompt S]
    claude -c -p <prompt> --output-format json [--model M] [--append-system-prompt S]
    claude -r <id> -p <prompt> --output-format json [--model M] [--append-system-prompt S]

Every value is passed through shlex.quote, so a POSIX shell parsing
the result hands the CLI each original string as exactly one argument.
Simple tokens (model names, UUIDs) come out unquoted.
"""
from __future__ import annotations

import logging
import shlex

from .errors import CommandBuildError
from .models import ConversationMode, ConversationRequest

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = "claude"
OUTPUT_FORMAT = "json"

_OPTIONAL_TEXT_FIELDS = ("model", "system_prompt", "cwd", "continuation_id")


def quote_text(text: str) -> str:
    """Quote *text* as a single shell word."""
    return shlex.quote(text)


def _check_text(name: str, value: str) -> None:
    if "\x00" in value:
        raise CommandBuildError(name, "must not contain NUL bytes")
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as exc:
        # Lone surrogates survive JSON decoding but cannot reach argv.
        raise CommandBuildError(name, "must be valid UTF-8 text") from exc


def validate_request(request: ConversationRequest) -> None:
    """Reject malformed requests before anything is spawned."""
    prompt = request.prompt
    if prompt is None:
        raise CommandBuildError("prompt", "is required")
    if not isinstance(prompt, str):
        raise CommandBuildError("prompt", "must be a string")
    if not prompt.strip():
        raise CommandBuildError("prompt", "must not be empty")
    _check_text("prompt", prompt)

    for name in _OPTIONAL_TEXT_FIELDS:
        value = getattr(request, name)
        if value is None:
            continue
        if not isinstance(value, str):
            raise CommandBuildError(name, "must be a string")
        _check_text(name, value)


def build_argv(
    request: ConversationRequest,
    mode: ConversationMode,
    command: str = DEFAULT_COMMAND,
) -> list[str]:
    """Build the argument vector for one CLI invocation."""
    validate_request(request)

    argv = [command]
    if mode is ConversationMode.CONTINUE:
        if request.continuation_id:
            argv.extend(["-r", request.continuation_id])
        else:
            argv.append("-c")
    elif request.continuation_id:
        logger.debug(
            "Ignoring continuation_id %s for a new conversation",
            request.continuation_id,
        )

    argv.extend(["-p", request.prompt, "--output-format", OUTPUT_FORMAT])

    if request.model:
        argv.extend(["--model", request.model])

    if request.system_prompt:
        # A continuation layers guidance onto the existing system prompt.
        flag = (
            "--system-prompt"
            if mode is ConversationMode.NEW
            else "--append-system-prompt"
        )
        argv.extend([flag, request.system_prompt])

    return argv


def build_command(
    request: ConversationRequest,
    mode: ConversationMode,
    command: str = DEFAULT_COMMAND,
) -> str:
    """Build the shell command line for one CLI invocation."""
    return " ".join(quote_text(arg) for arg in build_argv(request, mode, command))
