"""Tests for system prompt generation."""

import json
import logging

import pytest
from pydantic import ValidationError

from toolfence_core.function_calling.prompt import (
    build_json_tool_system_prompt,
    build_tool_choice_instruction,
    collect_tool_definitions,
)
from toolfence_core.models import FunctionTool, ProviderTool, ToolDefinition

WEATHER_TOOL = {
    "name": "get_weather",
    "description": "Get the current weather for a city",
    "parameters": {
        "type": "object",
        "properties": {"city": {"type": "string"}},
        "required": ["city"],
    },
}


class TestEmptyCatalog:
    """Prompts without tools must stay byte-identical."""

    def test_none_prompt(self):
        assert build_json_tool_system_prompt(None, []) == ""

    def test_existing_prompt(self):
        assert build_json_tool_system_prompt("Hello", []) == "Hello"

    @pytest.mark.parametrize("prompt", ["", "  padded  \n", "Multi\nline\n\n"])
    def test_prompt_is_unchanged(self, prompt):
        assert build_json_tool_system_prompt(prompt, []) == prompt

    def test_none_tools(self):
        assert build_json_tool_system_prompt("Hello", None) == "Hello"


class TestToolCatalog:
    """Tests for prompts with tools."""

    def test_basic_tool(self):
        result = build_json_tool_system_prompt(None, [
            {"name": "test", "description": "Test tool", "parameters": {"type": "object"}},
        ])
        assert "Available Tools" in result
        assert "test" in result

    def test_existing_prompt_comes_first(self):
        result = build_json_tool_system_prompt("You are helpful.", [WEATHER_TOOL])
        assert result.startswith("You are helpful.\n\n# Available Tools")

    def test_entry_contains_name_description_and_schema(self):
        result = build_json_tool_system_prompt(None, [WEATHER_TOOL])
        assert "### get_weather" in result
        assert "Get the current weather for a city" in result
        assert json.dumps(WEATHER_TOOL["parameters"]) in result

    def test_function_tool_records_accepted(self):
        result = build_json_tool_system_prompt(None, [
            FunctionTool(name="calc", description="Arithmetic", input_schema={"type": "object"}),
            {"type": "function", "name": "echo", "inputSchema": {"type": "string"}},
        ])
        assert "### calc\nDescription: Arithmetic\nParameters: {\"type\": \"object\"}" in result
        assert "### echo\nParameters: {\"type\": \"string\"}" in result

    def test_provider_tools_not_advertised(self, caplog):
        provider = {"type": "provider", "name": "web_search", "id": "openai.web_search", "args": {}}
        with caplog.at_level(logging.WARNING):
            result = build_json_tool_system_prompt(None, [provider, WEATHER_TOOL])
        assert "web_search" not in result
        assert "### get_weather" in result
        assert "tool:web_search" in caplog.text

    def test_provider_tool_records_not_advertised(self):
        provider = ProviderTool(name="web_search", id="openai.web_search")
        assert build_json_tool_system_prompt("Hello", [provider]) == "Hello"

    def test_unknown_tag_rejected(self):
        with pytest.raises(ValidationError):
            build_json_tool_system_prompt(None, [{"type": "plugin", "name": "x"}])

    def test_collect_tool_definitions(self):
        definitions, warnings = collect_tool_definitions([
            WEATHER_TOOL,
            {"type": "provider", "name": "web_search", "id": "openai.web_search", "args": {}},
        ])
        assert [d.name for d in definitions] == ["get_weather"]
        assert [w.feature for w in warnings] == ["tool:web_search"]

    def test_catalog_order_preserved(self):
        tools = [
            ToolDefinition(name="zeta", description="last alphabetically"),
            ToolDefinition(name="alpha", description="first alphabetically"),
        ]
        result = build_json_tool_system_prompt(None, tools)
        assert result.index("### zeta") < result.index("### alpha")

    def test_duplicates_not_removed(self):
        result = build_json_tool_system_prompt(None, [WEATHER_TOOL, WEATHER_TOOL])
        assert result.count("### get_weather") == 2

    def test_instructions_describe_fence_syntax(self):
        result = build_json_tool_system_prompt(None, [WEATHER_TOOL])
        assert "```tool_call" in result
        assert '{"name": "tool_name", "arguments": {"param": "value"}}' in result
        assert "```tool_result" in result
        assert "{tools_list}" not in result

    def test_custom_heading_and_markers(self):
        result = build_json_tool_system_prompt(
            None, [WEATHER_TOOL], heading="Tools", call_marker="fn_call", result_marker="fn_result"
        )
        assert result.startswith("# Tools\n\n")
        assert "```fn_call" in result
        assert "```fn_result" in result
        assert "```tool_call" not in result

    def test_custom_template(self):
        template = "Use ```{call_marker} blocks.\n{tools_list}\nEnd."
        result = build_json_tool_system_prompt(None, [WEATHER_TOOL], template=template)
        assert "Use ```tool_call blocks." in result
        assert "### get_weather" in result
        assert result.endswith("End.")


class TestToolChoiceInstruction:
    """Tests for tool choice instructions."""

    @pytest.mark.parametrize("choice", [None, "auto", {"type": "auto"}, "bogus", 3])
    def test_no_instruction(self, choice):
        assert build_tool_choice_instruction(choice) == ""

    def test_none_forbids_tools(self):
        assert "prohibited" in build_tool_choice_instruction("none")

    def test_required(self):
        assert "at least one tool" in build_tool_choice_instruction({"type": "required"})

    def test_specific_tool(self):
        assert "`get_weather`" in build_tool_choice_instruction({"type": "tool", "toolName": "get_weather"})

    def test_openai_style_specific_tool(self):
        choice = {"type": "function", "function": {"name": "calc"}}
        assert "`calc`" in build_tool_choice_instruction(choice)
