# SPDX-License-Identifier: GPL-3.0-or-later
#
# Toolfence: Text-fenced function calling for models without native tool calls.
# Copyright (C) 2025 The Toolfence Authors

"""
Function calling module for Toolfence.
"""

from .tools import (
    is_function_tool,
    create_unsupported_setting_warning,
    create_unsupported_tool_warning,
    prepare_tools,
)
from .prompt import build_json_tool_system_prompt, build_tool_choice_instruction, collect_tool_definitions
from .parser import (
    CALL_FENCE_MARKER,
    RESULT_FENCE_MARKER,
    parse_json_function_calls,
    format_tool_calls,
)
from .results import format_tool_results
from .streaming import ToolCallFenceDetector
from .protocol import ToolFenceProtocol

__all__ = [
    'CALL_FENCE_MARKER',
    'RESULT_FENCE_MARKER',
    'is_function_tool',
    'create_unsupported_setting_warning',
    'create_unsupported_tool_warning',
    'prepare_tools',
    'build_json_tool_system_prompt',
    'build_tool_choice_instruction',
    'collect_tool_definitions',
    'parse_json_function_calls',
    'format_tool_calls',
    'format_tool_results',
    'ToolCallFenceDetector',
    'ToolFenceProtocol',
]
