# SPDX-License-Identifier: GPL-3.0-or-later
#
# Toolfence: Text-fenced function calling for models without native tool calls.
# Copyright (C) 2025 The Toolfence Authors

"""
Configured entry point tying the function calling modules together.
"""

import logging
from typing import Any, Iterable, List, Optional

from ..config_loader import AppConfig
from ..models import CallWarning, ParsedResponse
from .parser import parse_json_function_calls, format_tool_calls
from .prompt import build_json_tool_system_prompt, build_tool_choice_instruction, collect_tool_definitions
from .results import format_tool_results
from .streaming import ToolCallFenceDetector

logger = logging.getLogger(__name__)


class ToolFenceProtocol:
    """Binds configured fence markers and prompt template to the protocol operations."""

    def __init__(self, config: Optional[AppConfig] = None):
        self.config = config or AppConfig()
        self.call_marker = self.config.fences.call_marker
        self.result_marker = self.config.fences.result_marker
        logger.debug(f"🔧 Protocol ready - call marker: {self.call_marker}, result marker: {self.result_marker}")

    def build_system_prompt(self, existing_prompt: Optional[str], tools: Iterable[Any],
                            tool_choice: Any = None) -> str:
        tools = list(tools or [])
        prompt = build_json_tool_system_prompt(
            existing_prompt,
            tools,
            template=self.config.prompt.template,
            heading=self.config.prompt.heading,
            call_marker=self.call_marker,
            result_marker=self.result_marker,
        )
        definitions, _ = collect_tool_definitions(tools)
        if definitions:
            prompt += build_tool_choice_instruction(tool_choice)
        return prompt

    def tool_warnings(self, tools: Iterable[Any]) -> List[CallWarning]:
        """Warnings for tools that build_system_prompt leaves out of the catalog."""
        _, warnings = collect_tool_definitions(tools)
        return warnings

    def new_detector(self) -> ToolCallFenceDetector:
        return ToolCallFenceDetector(self.call_marker)

    def parse(self, full_text: str) -> ParsedResponse:
        return parse_json_function_calls(full_text, self.call_marker)

    def format_results(self, results: Iterable[Any]) -> str:
        return format_tool_results(results, self.result_marker)

    def format_calls(self, tool_calls: Iterable[Any]) -> str:
        return format_tool_calls(tool_calls, self.call_marker)
