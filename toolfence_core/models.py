# SPDX-License-Identifier: GPL-3.0-or-later
#
# Toolfence: Text-fenced function calling for models without native tool calls.
# Copyright (C) 2025 The Toolfence Authors

"""
Data models shared by the function calling modules.
"""

from typing import List, Dict, Any, Optional, Union, Literal, Annotated

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

JSONSchema = Dict[str, Any]


class WireModel(BaseModel):
    """Base model whose JSON names are camelCase, populated by either name."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class ToolDefinition(WireModel):
    """A tool offered to the model in the system prompt."""
    name: str = Field(min_length=1, description="Tool name, unique within a catalog")
    description: str = Field(default="", description="Human readable description")
    parameters: JSONSchema = Field(default_factory=dict, description="JSON Schema, serialized verbatim")


class FunctionTool(WireModel):
    """Invocable function tool."""
    type: Literal["function"] = "function"
    name: str = Field(min_length=1)
    description: Optional[str] = None
    input_schema: JSONSchema = Field(default_factory=dict)


class ProviderTool(WireModel):
    """Host-provided tool that the text protocol cannot invoke."""
    type: Literal["provider"] = "provider"
    name: str = Field(min_length=1)
    id: str
    args: Dict[str, Any] = Field(default_factory=dict)


Tool = Annotated[Union[FunctionTool, ProviderTool], Field(discriminator="type")]


class ParsedToolCall(WireModel):
    tool_call_id: str
    tool_name: str
    args: Dict[str, Any] = Field(default_factory=dict)


class ToolResult(WireModel):
    tool_call_id: str
    tool_name: str
    result: Any = None


class ParsedResponse(WireModel):
    tool_calls: List[ParsedToolCall] = Field(default_factory=list)
    text_content: str = ""


class CallWarning(WireModel):
    """Non-fatal record of a setting or tool the text protocol cannot honor."""
    type: Literal["unsupported"] = "unsupported"
    feature: str
    details: str


class FenceDetection(WireModel):
    fence: Optional[str] = None
    prefix_text: str = ""


class StreamingFenceUpdate(WireModel):
    in_fence: bool = False
    safe_content: str = ""
    complete_fence: Optional[str] = None
