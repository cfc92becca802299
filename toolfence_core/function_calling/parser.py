# SPDX-License-Identifier: GPL-3.0-or-later
#
# Toolfence: Text-fenced function calling for models without native tool calls.
# Copyright (C) 2025 The Toolfence Authors

"""
Fenced JSON parsing for function calls.
"""

import re
import json
import uuid
import logging
from functools import lru_cache
from typing import List, Dict, Any, Optional, Iterable

from ..models import ParsedResponse, ParsedToolCall

logger = logging.getLogger(__name__)

CALL_FENCE_MARKER = "tool_call"
RESULT_FENCE_MARKER = "tool_result"
FENCE_DELIMITER = "```"


@lru_cache(maxsize=None)
def fence_pattern(marker: str) -> re.Pattern:
    """
    Compile the pattern for one complete fence.

    The opener is ```<marker> followed by optional blanks and a line break.
    The body runs lazily up to the first line that starts with ``` (leading
    indentation allowed). Group 1 is the raw body.
    """
    return re.compile(
        rf"{re.escape(FENCE_DELIMITER + marker)}[ \t]*\r?\n(.*?)^[ \t]*{re.escape(FENCE_DELIMITER)}",
        re.DOTALL | re.MULTILINE,
    )


@lru_cache(maxsize=None)
def opener_pattern(marker: str) -> re.Pattern:
    return re.compile(rf"{re.escape(FENCE_DELIMITER + marker)}[ \t]*\r?\n")


def render_fence(marker: str, body: str) -> str:
    return f"{FENCE_DELIMITER}{marker}\n{body}\n{FENCE_DELIMITER}"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {name}")


def loads_strict(text: str) -> Any:
    """json.loads that rejects NaN, Infinity and -Infinity like a standard JSON parser."""
    return json.loads(text, parse_constant=_reject_constant)


def _decode_call_body(body: str) -> Optional[Dict[str, Any]]:
    """Decode a fence body into {name, arguments}, or None if it is not a valid call."""
    try:
        payload = loads_strict(body)
    except ValueError as e:
        logger.debug(f"🔧 Fence body is not valid JSON: {e}")
        return None

    if not isinstance(payload, dict):
        logger.debug(f"🔧 Fence body is not a JSON object: {type(payload).__name__}")
        return None

    name = payload.get("name")
    if not isinstance(name, str) or not name.strip():
        logger.debug(f"🔧 Fence body has no usable name: {name!r}")
        return None

    arguments = payload.get("arguments", {})
    if not isinstance(arguments, dict):
        logger.debug(f"🔧 Arguments of {name} are not a JSON object: {type(arguments).__name__}")
        return None

    return {"name": name, "arguments": arguments}


def parse_json_function_calls(full_text: str, marker: str = CALL_FENCE_MARKER) -> ParsedResponse:
    """
    Extract every fenced tool call from a complete response.

    Blocks whose body does not decode to {"name": str, "arguments": object}
    stay in the text content verbatim instead of being dropped. Text without
    any fence is returned unchanged.
    """
    if not isinstance(full_text, str):
        raise TypeError(f"full_text must be str, got {type(full_text).__name__}")

    logger.debug(f"🔧 Fence parser starting, input length: {len(full_text)}")

    matches = list(fence_pattern(marker).finditer(full_text))
    if not matches:
        logger.debug("🔧 No complete tool call fence found")
        return ParsedResponse(tool_calls=[], text_content=full_text)

    batch_id = uuid.uuid4().hex[:12]
    tool_calls: List[ParsedToolCall] = []
    kept_parts: List[str] = []
    last_end = 0

    for i, match in enumerate(matches):
        body = match.group(1).strip()
        call = _decode_call_body(body)
        if call is None:
            logger.debug(f"🔧 Fence #{i + 1} demoted to text: {body[:100]!r}")
            continue

        kept_parts.append(full_text[last_end:match.start()])
        last_end = match.end()
        tool_calls.append(ParsedToolCall(
            tool_call_id=f"call_{batch_id}_{i}",
            tool_name=call["name"],
            args=call["arguments"],
        ))
        logger.debug(f"🔧 Added tool call #{i + 1}: {call['name']}")

    kept_parts.append(full_text[last_end:])
    text_content = "".join(kept_parts).strip()

    logger.debug(f"🔧 Final parsing result: {len(tool_calls)} tool calls, {len(text_content)} chars of text")
    return ParsedResponse(tool_calls=tool_calls, text_content=text_content)


def format_tool_calls(tool_calls: Iterable[Any], marker: str = CALL_FENCE_MARKER) -> str:
    """
    Render tool calls back into call fences for conversation history.

    Accepts ParsedToolCall records or OpenAI-style tool_calls dicts
    ({"id", "function": {"name", "arguments"}}).
    """
    fences = []
    for tool_call in tool_calls or []:
        if isinstance(tool_call, ParsedToolCall):
            name, args = tool_call.tool_name, tool_call.args
        else:
            function_info = tool_call.get("function") or {}
            name = function_info.get("name", "")
            arguments_json = function_info.get("arguments", "{}")
            if isinstance(arguments_json, dict):
                args = arguments_json
            else:
                try:
                    args = loads_strict(arguments_json)
                except (ValueError, TypeError):
                    # Not a valid JSON string, keep it as a raw argument
                    args = {"raw_arguments": arguments_json}
                if not isinstance(args, dict):
                    args = {"raw_arguments": arguments_json}

        body = json.dumps({"name": name, "arguments": args}, ensure_ascii=False, allow_nan=False)
        fences.append(render_fence(marker, body))

    logger.debug(f"🔧 Formatted {len(fences)} tool calls as fences")
    return "\n\n".join(fences)
