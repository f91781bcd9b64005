"""
Configuration module for the form builder.

Handles environment variables and default settings.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from form_builder.constants import REACT_HOOK_FORM

# Load environment variables
load_dotenv()


@dataclass
class FormBuilderConfig:
    """Configuration settings for the form builder."""

    # Code generation
    default_library: str = REACT_HOOK_FORM

    # Durable preferences (selected library)
    preferences_path: str = str(Path.home() / ".form_builder" / "preferences.json")

    # HTTP builder API
    server_port: int = 9110

    # MCP Server settings
    mcp_transport: str = "stdio"  # stdio or sse
    mcp_port: int = 8080

    # Output settings
    indent_json_output: int = 2
    log_level: str = "INFO"
    verbose_output: bool = False

    @classmethod
    def from_env(cls) -> "FormBuilderConfig":
        """
        Create configuration from environment variables.

        If an environment variable is not set, uses the class field default value.
        """
        _defaults = cls()

        return cls(
            default_library=os.getenv("FORM_BUILDER_DEFAULT_LIBRARY", _defaults.default_library),
            preferences_path=os.getenv("FORM_BUILDER_PREFERENCES_PATH", _defaults.preferences_path),
            server_port=int(os.getenv("FORM_BUILDER_SERVER_PORT", str(_defaults.server_port))),
            mcp_transport=os.getenv("MCP_TRANSPORT", _defaults.mcp_transport),
            mcp_port=int(os.getenv("MCP_PORT", str(_defaults.mcp_port))),
            indent_json_output=int(os.getenv("FORM_BUILDER_INDENT_JSON", str(_defaults.indent_json_output))),
            log_level=os.getenv("FORM_BUILDER_LOG_LEVEL", _defaults.log_level).upper(),
            verbose_output=os.getenv("FORM_BUILDER_VERBOSE_OUTPUT", str(_defaults.verbose_output).lower()).lower() == "true",
        )


config = FormBuilderConfig.from_env()


def get_config() -> FormBuilderConfig:
    """Get the current configuration."""
    return config


def update_config(**kwargs) -> FormBuilderConfig:
    """Update configuration settings."""
    global config
    for key, value in kwargs.items():
        if hasattr(config, key):
            setattr(config, key, value)
    return config
