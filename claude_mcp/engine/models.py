"""Core data models for the Claude CLI bridge.

All dataclasses and enums. Every value here lives for a single
tool call; nothing is persisted.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class ConversationMode(str, Enum):
    """Which command form to build for a turn."""
    NEW = "new"
    CONTINUE = "continue"


@dataclass
class ConversationRequest:
    """One conversational turn.

    continuation_id is the opaque session token minted by the CLI.
    When absent in CONTINUE mode the CLI resumes its most recent
    conversation.
    """
    prompt: str
    model: str | None = None
    system_prompt: str | None = None
    cwd: str | None = None
    continuation_id: str | None = None


@dataclass
class ExecutionOutcome:
    """Captured output of a successful CLI run."""
    stdout: str
    stderr: str = ""
    exit_code: int = 0
    duration_seconds: float = 0.0


@dataclass(frozen=True)
class StructuredOutput:
    """CLI output that decoded as JSON."""
    record: Any


@dataclass(frozen=True)
class RawTextOutput:
    """CLI output that did not decode; carried through as text."""
    text: str


DecodedOutput = Union[StructuredOutput, RawTextOutput]


@dataclass
class InterpretedResponse:
    """Uniform result of a turn, regardless of output shape."""
    response: str
    session_id: str | None = None
    is_error: bool = False
