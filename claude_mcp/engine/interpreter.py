"""Interpret claude CLI output.

With ``--output-format json`` the CLI prints a single record:
{
  "type": "result",
  "result": "response text",
  "session_id": "uuid",
  "is_error": false,
  ...
}

Anything that does not decode as JSON is passed through as plain
text. That is an expected outcome (the CLI crashed before emitting
JSON, or an older CLI ignored the flag), not an error.
"""
from __future__ import annotations

import json
import logging
from typing import Any

from .models import DecodedOutput, InterpretedResponse, RawTextOutput, StructuredOutput

logger = logging.getLogger(__name__)


def decode_output(stdout: str) -> DecodedOutput:
    """Decode raw CLI stdout into a structured record or raw text."""
    try:
        record = json.loads(stdout)
    except json.JSONDecodeError as exc:
        logger.debug("Output is not JSON (%s), passing through as text", exc)
        return RawTextOutput(text=stdout.strip())
    return StructuredOutput(record=record)


def _serialize(record: Any) -> str:
    return json.dumps(record, ensure_ascii=False, separators=(",", ":"))


def _interpret_record(record: Any) -> InterpretedResponse:
    if not isinstance(record, dict):
        return InterpretedResponse(response=_serialize(record))

    result = record.get("result")
    response = result if isinstance(result, str) else _serialize(record)

    session_id = record.get("session_id")
    if not isinstance(session_id, str) or not session_id:
        session_id = None

    return InterpretedResponse(
        response=response,
        session_id=session_id,
        is_error=bool(record.get("is_error", False)),
    )


def interpret_output(
    stdout: str,
    fallback_session_id: str | None = None,
) -> InterpretedResponse:
    """Turn raw CLI stdout into an InterpretedResponse.

    When the output carries no session id, *fallback_session_id* (the
    id the turn was requested with, if any) is used so a continuation
    never loses track of its conversation.
    """
    logger.debug("Interpreting output (%d chars)", len(stdout))
    decoded = decode_output(stdout)

    if isinstance(decoded, StructuredOutput):
        interpreted = _interpret_record(decoded.record)
        logger.debug(
            "Decoded JSON output: session_id=%s is_error=%s response_length=%d",
            interpreted.session_id,
            interpreted.is_error,
            len(interpreted.response),
        )
    else:
        interpreted = InterpretedResponse(response=decoded.text)

    if interpreted.session_id is None and fallback_session_id:
        interpreted.session_id = fallback_session_id
    return interpreted
