"""Top-level checkout configuration.

Loads and validates the YAML configuration of the payment recovery layer.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from payment_recovery.core.config.execution import EscalationConfig, RetryConfig
from payment_recovery.core.errors.exceptions import ConfigError


class LogConfig(BaseModel):
    """Configuration for structured logging."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Minimum log level to capture",
    )
    format: Literal["json", "console"] = Field(
        default="console",
        description="Output format: json for structured, console for human-readable",
    )
    include_timestamps: bool = Field(
        default=True,
        description="Include ISO8601 UTC timestamps in log entries",
    )
    include_context: bool = Field(
        default=True,
        description="Include bound checkout context (order_code, session_id) in log entries",
    )


class CheckoutConfig(BaseModel):
    """Complete configuration for payment recovery.

    Example YAML:
        retry:
          max_attempts: 3
          base_delay_seconds: 1.0
          max_delay_seconds: 10.0
          backoff_multiplier: 2.0
        escalation:
          alternatives_threshold: 3
          max_auto_retries: 2
        logging:
          level: INFO
          format: json
    """

    retry: RetryConfig = Field(default_factory=RetryConfig)
    escalation: EscalationConfig = Field(default_factory=EscalationConfig)
    logging: LogConfig = Field(default_factory=LogConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> CheckoutConfig:
        """Load checkout configuration from a YAML file.

        Raises:
            ConfigError: If the file is missing, unparsable or invalid.
        """
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        return cls.from_yaml_string(text)

    @classmethod
    def from_yaml_string(cls, yaml_str: str) -> CheckoutConfig:
        """Load checkout configuration from a YAML string.

        An empty document yields the defaults.

        Raises:
            ConfigError: If the text is not valid YAML or fails validation.
        """
        try:
            data = yaml.safe_load(yaml_str)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}") from e
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"Config root must be a mapping, got {type(data).__name__}"
            )
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(str(e)) from e
