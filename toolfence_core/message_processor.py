# SPDX-License-Identifier: GPL-3.0-or-later
#
# Toolfence: Text-fenced function calling for models without native tool calls.
# Copyright (C) 2025 The Toolfence Authors

"""
Message processing utilities.
"""

import logging
from typing import List, Dict, Any, Optional

from .config_loader import AppConfig
from .function_calling.parser import format_tool_calls
from .function_calling.results import format_tool_results
from .models import ToolResult

logger = logging.getLogger(__name__)

UNKNOWN_TOOL_NAME = "unknown"


def _flush_tool_results(pending: List[ToolResult], processed_messages: List[Dict[str, Any]],
                        result_marker: str) -> None:
    if not pending:
        return
    processed_messages.append({
        "role": "user",
        "content": format_tool_results(pending, result_marker)
    })
    logger.debug(f"🔧 Converted {len(pending)} tool messages to one user message")
    pending.clear()


def preprocess_messages(messages: List[Dict[str, Any]], config: Optional[AppConfig] = None) -> List[Dict[str, Any]]:
    """
    Rewrite tool traffic in a chat history as fenced text.

    Assistant tool_calls are appended to the assistant content as call fences,
    and each run of consecutive tool messages becomes one user message of
    result fences. Tool names for results are looked up from the calls seen
    earlier in the same history.
    """
    config = config or AppConfig()
    call_marker = config.fences.call_marker
    result_marker = config.fences.result_marker
    convert_developer = config.features.convert_developer_to_system

    tool_names: Dict[str, str] = {}
    pending_results: List[ToolResult] = []
    processed_messages: List[Dict[str, Any]] = []

    for message in messages:
        role = message.get("role") if isinstance(message, dict) else None

        if role == "tool":
            tool_call_id = message.get("tool_call_id") or ""
            tool_name = tool_names.get(tool_call_id) or message.get("name")
            if not tool_name:
                logger.debug(f"🔧 Tool call mapping not found for {tool_call_id}, using default name")
                tool_name = UNKNOWN_TOOL_NAME
            pending_results.append(ToolResult(
                tool_call_id=tool_call_id,
                tool_name=tool_name,
                result=message.get("content"),
            ))
            continue

        _flush_tool_results(pending_results, processed_messages, result_marker)

        if role == "assistant" and message.get("tool_calls"):
            tool_calls = message["tool_calls"]
            for tool_call in tool_calls:
                call_id = tool_call.get("id")
                name = (tool_call.get("function") or {}).get("name")
                if call_id and name:
                    tool_names[call_id] = name

            original_content = message.get("content") or ""
            final_content = f"{original_content}\n\n{format_tool_calls(tool_calls, call_marker)}".strip()

            processed_message = {
                "role": "assistant",
                "content": final_content
            }
            # Copy other potential keys from the original message, except tool_calls
            for key, value in message.items():
                if key not in ["role", "content", "tool_calls"]:
                    processed_message[key] = value

            processed_messages.append(processed_message)
            logger.debug(f"🔧 Converted {len(tool_calls)} assistant tool_calls to content")

        elif role == "developer" and convert_developer:
            processed_message = message.copy()
            processed_message["role"] = "system"
            processed_messages.append(processed_message)
            logger.debug("🔧 Converted developer message to system message")

        else:
            processed_messages.append(message)

    _flush_tool_results(pending_results, processed_messages, result_marker)
    return processed_messages


def validate_message_structure(messages: List[Dict[str, Any]], convert_developer: bool = True) -> bool:
    """Validate if message structure meets requirements."""
    valid_roles = ["system", "user", "assistant", "tool"]
    if not convert_developer:
        valid_roles.append("developer")

    for i, msg in enumerate(messages):
        if not isinstance(msg, dict):
            logger.error(f"❌ Message {i} is not a mapping: {type(msg).__name__}")
            return False

        if "role" not in msg:
            logger.error(f"❌ Message {i} missing role field")
            return False

        if msg["role"] not in valid_roles:
            logger.error(f"❌ Invalid role value for message {i}: {msg['role']}")
            return False

        if msg["role"] == "tool" and "tool_call_id" not in msg:
            logger.error(f"❌ Tool message {i} missing tool_call_id field")
            return False

        logger.debug(f"✅ Message {i} validation passed: role={msg['role']}")

    logger.debug(f"✅ All messages validated successfully, total {len(messages)} messages")
    return True
