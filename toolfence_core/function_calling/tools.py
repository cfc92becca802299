# SPDX-License-Identifier: GPL-3.0-or-later
#
# Toolfence: Text-fenced function calling for models without native tool calls.
# Copyright (C) 2025 The Toolfence Authors

"""
Tool classification and unsupported-feature warnings.
"""

import logging
from typing import List, Any, Iterable, Tuple, Union

from pydantic import TypeAdapter

from ..models import CallWarning, FunctionTool, ProviderTool, Tool, ToolDefinition

logger = logging.getLogger(__name__)

_TOOL_ADAPTER = TypeAdapter(Tool)


def is_function_tool(tool: Any) -> bool:
    """Return True iff the tool's ``type`` tag is ``"function"``. Never raises."""
    if isinstance(tool, dict):
        return tool.get("type") == "function"
    return getattr(tool, "type", None) == "function"


def create_unsupported_setting_warning(feature: str, details: str) -> CallWarning:
    return CallWarning(feature=feature, details=details)


def create_unsupported_tool_warning(tool: Any, details: str) -> CallWarning:
    name = tool.get("name") if isinstance(tool, dict) else tool.name
    return CallWarning(feature=f"tool:{name}", details=details)


def to_tool(tool: Union[FunctionTool, ProviderTool, dict]) -> Union[FunctionTool, ProviderTool]:
    """Validate a mapping into the tagged tool union."""
    if isinstance(tool, (FunctionTool, ProviderTool)):
        return tool
    return _TOOL_ADAPTER.validate_python(tool)


def prepare_tools(tools: Iterable[Any]) -> Tuple[List[ToolDefinition], List[CallWarning]]:
    """
    Split a tool list into prompt-ready definitions and warnings.

    Function tools become ToolDefinition entries in their original order.
    Provider tools cannot be invoked through the text protocol, so each one
    produces an unsupported-tool warning instead.
    """
    definitions: List[ToolDefinition] = []
    warnings: List[CallWarning] = []

    for raw in tools or []:
        tool = to_tool(raw)
        if isinstance(tool, FunctionTool):
            definitions.append(ToolDefinition(
                name=tool.name,
                description=tool.description or "",
                parameters=tool.input_schema,
            ))
        elif isinstance(tool, ProviderTool):
            logger.debug(f"🔧 Provider tool not supported by text protocol: {tool.name} ({tool.id})")
            warnings.append(create_unsupported_tool_warning(
                tool, "Provider tools are not supported by text-based function calling"
            ))
        else:
            raise TypeError(f"Unhandled tool variant: {type(tool).__name__}")

    logger.debug(f"🔧 Prepared {len(definitions)} tool definitions, {len(warnings)} warnings")
    return definitions, warnings
