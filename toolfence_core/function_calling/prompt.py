# SPDX-License-Identifier: GPL-3.0-or-later
#
# Toolfence: Text-fenced function calling for models without native tool calls.
# Copyright (C) 2025 The Toolfence Authors

"""
Prompt generation for function calling.
"""

import json
import logging
from typing import List, Any, Iterable, Optional, Tuple

from ..models import CallWarning, FunctionTool, ProviderTool, ToolDefinition
from .parser import CALL_FENCE_MARKER, RESULT_FENCE_MARKER, FENCE_DELIMITER
from .tools import prepare_tools

logger = logging.getLogger(__name__)

DEFAULT_HEADING = "Available Tools"


def get_function_call_prompt_template(call_marker: str = CALL_FENCE_MARKER,
                                      result_marker: str = RESULT_FENCE_MARKER,
                                      custom_template: str = None) -> str:
    """
    Generate the instruction template for the given fence markers.
    The returned template still contains the {tools_list} placeholder.
    """
    if custom_template:
        logger.debug("🔧 Using custom prompt template from configuration")
        return (custom_template
                .replace("{call_marker}", call_marker)
                .replace("{result_marker}", result_marker))

    call_open = f"{FENCE_DELIMITER}{call_marker}"
    result_open = f"{FENCE_DELIMITER}{result_marker}"
    return f"""You can call the following tools to help answer the user:

{{tools_list}}

## Tool Call Format

To call a tool, output a fenced block exactly like this:

{call_open}
{{"name": "tool_name", "arguments": {{"param": "value"}}}}
{FENCE_DELIMITER}

Rules:
1. The opening line must be exactly {call_open} and the closing line must be exactly {FENCE_DELIMITER}.
2. The body is a single line of JSON with two keys: "name" (the exact tool name from the list) and "arguments" (a JSON object matching the tool's parameters).
3. Use one fenced block per tool call. You can call several tools by writing several blocks one after another.
4. Do not invent tool names or parameter keys.
5. After calling tools, stop and wait. Results are returned to you in {result_open} blocks containing "toolCallId", "toolName" and "result".
6. If no tool is needed, answer normally without any {call_open} block."""


def _is_tagged(tool: Any) -> bool:
    if isinstance(tool, (FunctionTool, ProviderTool)):
        return True
    return isinstance(tool, dict) and "type" in tool


def collect_tool_definitions(tools: Iterable[Any]) -> Tuple[List[ToolDefinition], List[CallWarning]]:
    """
    Turn the tools handed to the prompt builder into catalog entries.

    Anything carrying a ``type`` tag goes through prepare_tools, so provider
    tools are never advertised and produce warnings instead. Untagged entries
    are plain name/description/parameters records.
    """
    definitions: List[ToolDefinition] = []
    warnings: List[CallWarning] = []
    for tool in tools or []:
        if isinstance(tool, ToolDefinition):
            definitions.append(tool)
        elif _is_tagged(tool):
            prepared, tool_warnings = prepare_tools([tool])
            definitions.extend(prepared)
            warnings.extend(tool_warnings)
        else:
            definitions.append(ToolDefinition.model_validate(tool))
    return definitions, warnings


def format_tool_entry(tool: ToolDefinition) -> str:
    """Render one catalog entry: name, description and JSON schema."""
    schema = json.dumps(tool.parameters, ensure_ascii=False)
    lines = [f"### {tool.name}"]
    if tool.description:
        lines.append(f"Description: {tool.description}")
    lines.append(f"Parameters: {schema}")
    return "\n".join(lines)


def build_json_tool_system_prompt(existing_prompt: Optional[str],
                                  tools: Iterable[Any],
                                  template: Optional[str] = None,
                                  heading: str = DEFAULT_HEADING,
                                  call_marker: str = CALL_FENCE_MARKER,
                                  result_marker: str = RESULT_FENCE_MARKER) -> str:
    """
    Append the tool catalog and fence instructions to a system prompt.

    Args:
        existing_prompt: System prompt to extend, may be None
        tools: ToolDefinition records, tagged function/provider tools, or mappings with
               name/description/parameters. Provider tools are skipped with a warning.
        template: Custom instruction template with {tools_list} and {call_marker}
        heading: Heading placed above the catalog

    Returns the prompt unchanged (or "" for None) when there are no tools,
    so tool-less requests stay byte-identical.
    """
    definitions, warnings = collect_tool_definitions(tools)
    for warning in warnings:
        logger.warning(f"⚠️  Tool left out of the prompt: {warning.feature} - {warning.details}")
    if not definitions:
        return existing_prompt if existing_prompt is not None else ""

    tools_list = "\n\n".join(format_tool_entry(tool) for tool in definitions)
    prompt_template = get_function_call_prompt_template(call_marker, result_marker, template)
    tool_section = f"# {heading}\n\n" + prompt_template.replace("{tools_list}", tools_list)

    if existing_prompt:
        prompt_content = f"{existing_prompt}\n\n{tool_section}"
    else:
        prompt_content = tool_section

    logger.debug(f"🔧 Generated tool prompt for {len(definitions)} tools: {len(prompt_content)} chars")
    return prompt_content


def build_tool_choice_instruction(tool_choice: Any) -> str:
    """Extra instruction for a tool choice setting, or "" when nothing applies."""
    if tool_choice is None:
        return ""

    if isinstance(tool_choice, str):
        choice_type, tool_name = tool_choice, None
    elif isinstance(tool_choice, dict):
        choice_type = tool_choice.get("type")
        tool_name = tool_choice.get("toolName") or tool_choice.get("tool_name")
        # OpenAI style {"type": "function", "function": {"name": ...}}
        if tool_name is None and isinstance(tool_choice.get("function"), dict):
            tool_name = tool_choice["function"].get("name")
    else:
        logger.debug(f"🔧 Unsupported tool_choice type: {type(tool_choice)}")
        return ""

    if choice_type == "auto":
        return ""
    if choice_type == "none":
        return "\n\n**IMPORTANT:** You are prohibited from using any tools in this round. Answer the user's question directly."
    if choice_type == "required":
        return "\n\n**IMPORTANT:** In this round you must call at least one tool."
    if choice_type in ("tool", "function") and tool_name:
        return f"\n\n**IMPORTANT:** In this round, you must use ONLY the tool named `{tool_name}`."

    logger.debug(f"🔧 Unknown tool_choice value: {tool_choice}")
    return ""
