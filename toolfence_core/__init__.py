# SPDX-License-Identifier: GPL-3.0-or-later
#
# Toolfence: Text-fenced function calling for models without native tool calls.
# Copyright (C) 2025 The Toolfence Authors

"""
Toolfence Core - text-fenced function calling for models without native tool calls.
"""

__version__ = "1.0.0"

# Re-export commonly used components for convenience
from .models import (
    CallWarning,
    FenceDetection,
    FunctionTool,
    ParsedResponse,
    ParsedToolCall,
    ProviderTool,
    StreamingFenceUpdate,
    ToolDefinition,
    ToolResult,
)
from .config_loader import AppConfig, ConfigLoader, configure_logging
from .function_calling import (
    CALL_FENCE_MARKER,
    RESULT_FENCE_MARKER,
    ToolCallFenceDetector,
    ToolFenceProtocol,
    build_json_tool_system_prompt,
    build_tool_choice_instruction,
    collect_tool_definitions,
    create_unsupported_setting_warning,
    create_unsupported_tool_warning,
    format_tool_calls,
    format_tool_results,
    is_function_tool,
    parse_json_function_calls,
    prepare_tools,
)
from .message_processor import preprocess_messages, validate_message_structure

__all__ = [
    'CallWarning',
    'FenceDetection',
    'FunctionTool',
    'ParsedResponse',
    'ParsedToolCall',
    'ProviderTool',
    'StreamingFenceUpdate',
    'ToolDefinition',
    'ToolResult',
    'AppConfig',
    'ConfigLoader',
    'configure_logging',
    'CALL_FENCE_MARKER',
    'RESULT_FENCE_MARKER',
    'ToolCallFenceDetector',
    'ToolFenceProtocol',
    'build_json_tool_system_prompt',
    'build_tool_choice_instruction',
    'collect_tool_definitions',
    'create_unsupported_setting_warning',
    'create_unsupported_tool_warning',
    'format_tool_calls',
    'format_tool_results',
    'is_function_tool',
    'parse_json_function_calls',
    'prepare_tools',
    'preprocess_messages',
    'validate_message_structure',
]
