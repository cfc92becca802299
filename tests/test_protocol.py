"""End-to-end tests for the configured protocol facade."""

import toolfence_core
from toolfence_core import AppConfig, ToolFenceProtocol, ToolResult

TOOLS = [{"name": "calc", "description": "Evaluate arithmetic", "parameters": {"type": "object"}}]


class TestToolFenceProtocol:
    """Tests for ToolFenceProtocol."""

    def test_conversation_turn(self):
        protocol = ToolFenceProtocol()
        system = protocol.build_system_prompt("Be precise.", TOOLS)
        assert system.startswith("Be precise.\n\n# Available Tools")

        model_output = 'Computing.\n```tool_call\n{"name": "calc", "arguments": {"expression": "6*7"}}\n```'
        detector = protocol.new_detector()
        for i in range(0, len(model_output), 5):
            detector.add_chunk(model_output[i:i + 5])
        assert detector.detect_fence().fence == '{"name": "calc", "arguments": {"expression": "6*7"}}'

        parsed = protocol.parse(model_output)
        assert parsed.text_content == "Computing."
        call = parsed.tool_calls[0]

        results = protocol.format_results([
            ToolResult(tool_call_id=call.tool_call_id, tool_name=call.tool_name, result=42),
        ])
        assert call.tool_call_id in results
        assert results.startswith("```tool_result\n")

    def test_tool_less_prompt_unchanged(self):
        protocol = ToolFenceProtocol()
        assert protocol.build_system_prompt("Base", [], tool_choice="required") == "Base"
        assert protocol.build_system_prompt(None, []) == ""

    def test_tool_choice_appended(self):
        prompt = ToolFenceProtocol().build_system_prompt(None, TOOLS, tool_choice="required")
        assert prompt.endswith("In this round you must call at least one tool.")

    def test_configured_markers(self):
        config = AppConfig(
            fences={"call_marker": "fn", "result_marker": "fn_out"},
            prompt={"heading": "Functions"},
        )
        protocol = ToolFenceProtocol(config)

        prompt = protocol.build_system_prompt(None, TOOLS)
        assert prompt.startswith("# Functions")
        assert "```fn\n" in prompt

        text = protocol.format_calls([{"id": "1", "function": {"name": "calc", "arguments": "{}"}}])
        assert text.startswith("```fn\n")
        assert protocol.parse(text).tool_calls[0].tool_name == "calc"
        assert protocol.new_detector().marker == "fn"
        assert protocol.format_results([{"toolCallId": "1", "toolName": "calc", "result": 0}]).startswith("```fn_out")

    def test_provider_tools_surface_warnings(self):
        protocol = ToolFenceProtocol()
        provider = {"type": "provider", "name": "web_search", "id": "openai.web_search", "args": {}}
        assert protocol.build_system_prompt("Hi", [provider], tool_choice="required") == "Hi"
        warnings = protocol.tool_warnings([provider] + TOOLS)
        assert [w.feature for w in warnings] == ["tool:web_search"]

    def test_package_exports(self):
        for name in toolfence_core.__all__:
            assert hasattr(toolfence_core, name)
