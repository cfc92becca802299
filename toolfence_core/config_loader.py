# SPDX-License-Identifier: GPL-3.0-or-later
#
# Toolfence: Text-fenced function calling for models without native tool calls.
# Copyright (C) 2025 The Toolfence Authors

import os
import logging
import yaml
from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "DISABLED"]


class FenceConfig(BaseModel):
    """Fence marker configuration"""
    call_marker: str = Field(default="tool_call", description="Word after ``` that opens a tool call fence")
    result_marker: str = Field(default="tool_result", description="Word after ``` that opens a tool result fence")

    @field_validator('call_marker', 'result_marker')
    def validate_marker(cls, v):
        if not v or not v.strip():
            raise ValueError('fence marker cannot be empty')
        if any(ch.isspace() for ch in v) or '`' in v:
            raise ValueError(f"fence marker '{v}' must not contain whitespace or backticks")
        return v

    @model_validator(mode='after')
    def validate_distinct_markers(self):
        if self.call_marker == self.result_marker:
            raise ValueError('call_marker and result_marker must differ')
        return self


class PromptConfig(BaseModel):
    """System prompt configuration"""
    heading: str = Field(default="Available Tools", description="Heading of the tool catalog section")
    template: Optional[str] = Field(default=None, description="Custom instruction template for function calling")

    @field_validator('heading')
    def validate_heading(cls, v):
        if not v or v.strip() == "":
            raise ValueError('prompt heading cannot be empty')
        return v.strip()

    @field_validator('template')
    def validate_template(cls, v):
        if v:
            if "{tools_list}" not in v or "{call_marker}" not in v:
                raise ValueError("custom prompt template must contain the {tools_list} and {call_marker} placeholders")
        return v


class FeaturesConfig(BaseModel):
    """Feature configuration"""
    log_level: str = Field(default="INFO", description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL, or DISABLED")
    convert_developer_to_system: bool = Field(default=True, description="Convert developer role to system role")

    @field_validator('log_level')
    def validate_log_level(cls, v):
        if v.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"log level must be one of: {', '.join(VALID_LOG_LEVELS)}")
        return v.upper()


class AppConfig(BaseModel):
    """Application full configuration"""
    fences: FenceConfig = Field(default_factory=FenceConfig)
    prompt: PromptConfig = Field(default_factory=PromptConfig)
    features: FeaturesConfig = Field(default_factory=FeaturesConfig)


class ConfigLoader:
    """Configuration loader"""

    def __init__(self, config_path: str = "config.yaml"):
        self.config_path = config_path
        self._config: Optional[AppConfig] = None

    def load_config(self) -> AppConfig:
        """Load configuration file"""
        if not os.path.exists(self.config_path):
            raise FileNotFoundError(
                f"Configuration file '{self.config_path}' not found. "
                f"Please copy 'config.example.yaml' to '{self.config_path}' and modify the configuration as needed."
            )

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Configuration file format error: {e}")

        # An empty file means "all defaults"
        if config_data is None:
            config_data = {}
        if not isinstance(config_data, dict):
            raise ValueError("Configuration file must contain a mapping at the top level")

        try:
            self._config = AppConfig(**config_data)
            return self._config
        except Exception as e:
            raise ValueError(f"Configuration validation failed: {e}")

    @property
    def config(self) -> AppConfig:
        """Get configuration object"""
        if self._config is None:
            self.load_config()
        return self._config

    def reload_config(self) -> AppConfig:
        """Force reload configuration from disk"""
        self._config = None
        return self.load_config()

    def get_log_level(self) -> str:
        """Get configured log level"""
        return self.config.features.log_level


def configure_logging(log_level_str: str = "INFO") -> int:
    """Apply a configured log level, adding the default handler only once."""
    log_level_str = log_level_str.upper()
    if log_level_str == "DISABLED":
        log_level = logging.CRITICAL + 1
    else:
        log_level = getattr(logging, log_level_str, logging.INFO)

    # Avoid adding duplicate handlers on reload
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(
            level=log_level,
            format=LOG_FORMAT,
            datefmt=LOG_DATE_FORMAT
        )
    else:
        root_logger.setLevel(log_level)
    return log_level
