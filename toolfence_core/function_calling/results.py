# SPDX-License-Identifier: GPL-3.0-or-later
#
# Toolfence: Text-fenced function calling for models without native tool calls.
# Copyright (C) 2025 The Toolfence Authors

"""
Formatting of tool execution results for re-injection into the conversation.
"""

import json
import logging
from typing import Any, Iterable

from ..models import ToolResult
from .parser import RESULT_FENCE_MARKER, render_fence

logger = logging.getLogger(__name__)


def format_tool_results(results: Iterable[Any], marker: str = RESULT_FENCE_MARKER) -> str:
    """Render each result as a fenced JSON block, blocks separated by a blank line."""
    blocks = []
    for item in results or []:
        result = item if isinstance(item, ToolResult) else ToolResult.model_validate(item)
        logger.debug(f"🔧 Formatting tool call result: tool_call_id={result.tool_call_id}, tool={result.tool_name}")
        body = json.dumps(result.to_wire(), ensure_ascii=False, allow_nan=False)
        blocks.append(render_fence(marker, body))

    return "\n\n".join(blocks)
