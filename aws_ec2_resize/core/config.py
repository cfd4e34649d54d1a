"""Configuration management for the EC2 resize handler."""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from aws_ec2_resize.core.exceptions import ConfigurationError


class HandlerConfig(BaseModel):
    """Configuration model for the EC2 resize handler."""

    model_config = ConfigDict(populate_by_name=True)

    aws_environment_profile: Dict[str, str] = Field(
        default_factory=dict,
        alias="AwsEnvironmentProfile",
        description="Maps logical environment names to AWS credential profiles",
    )
    credential_file: Optional[str] = Field(
        default=None,
        alias="CredentialFile",
        description="Optional shared credentials file overriding ~/.aws/credentials",
    )
    stop_poll_interval: float = Field(
        default=5.0, gt=0, alias="StopPollInterval",
        description="Seconds between instance state checks while stopping",
    )
    stop_timeout: float = Field(
        default=300.0, gt=0, alias="StopTimeout",
        description="Seconds to wait for an instance to stop before aborting",
    )
    max_workers: int = Field(
        default=1, ge=1, alias="MaxWorkers",
        description="Number of instances resized concurrently",
    )

    @field_validator('aws_environment_profile')
    @classmethod
    def validate_profiles(cls, v: Dict[str, str]) -> Dict[str, str]:
        """Reject environments mapped to blank profile names."""
        blank = [env for env, profile in v.items() if not profile or not profile.strip()]
        if blank:
            raise ValueError(f"Environments without a credential profile: {', '.join(blank)}")
        return v

    def resolve_profile(self, environment: Optional[str]) -> Optional[str]:
        """Return the credential profile for an environment, or None."""
        if not environment or not environment.strip():
            return None
        return self.aws_environment_profile.get(environment)

    @classmethod
    def from_values(cls, values: Union[str, Dict[str, Any], None]) -> "HandlerConfig":
        """Build a config from the host's raw config payload.

        Args:
            values: JSON or YAML text, an already decoded mapping, or None
                for an empty configuration.

        Raises:
            ConfigurationError: If the payload is not a valid configuration.
        """
        if values is None:
            return cls()

        data = values
        if isinstance(values, str):
            if not values.strip():
                return cls()
            try:
                data = yaml.safe_load(values)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid handler configuration: {e}")

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigurationError("Handler configuration must be a mapping")

        try:
            return cls.model_validate(data)
        except ValueError as e:
            raise ConfigurationError(f"Invalid handler configuration: {e}")


class ConfigManager:
    """Manages the local handler configuration file."""

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize configuration manager.

        Args:
            config_path: Optional configuration file path.
                         Defaults to ~/.aws-ec2-resize/config.json
        """
        if config_path is None:
            config_path = Path.home() / ".aws-ec2-resize" / "config.json"

        self.config_file = Path(config_path)
        self.config_dir = self.config_file.parent

    def load_config(self) -> Optional[HandlerConfig]:
        """Load configuration from file.

        Returns:
            HandlerConfig if the file exists, None otherwise.

        Raises:
            ConfigurationError: If configuration file is corrupted or invalid.
        """
        if not self.config_file.exists():
            return None

        try:
            with open(self.config_file, 'r') as f:
                content = f.read()
        except OSError as e:
            raise ConfigurationError(f"Failed to load configuration: {e}")

        return HandlerConfig.from_values(content)

    def save_config(self, config: HandlerConfig) -> None:
        """Save configuration to file.

        Args:
            config: Configuration object to save.

        Raises:
            ConfigurationError: If unable to write configuration file.
        """
        temp_file = self.config_file.with_suffix('.tmp')
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            config_dict = config.model_dump(by_alias=True)

            # Write atomically by writing to temp file first
            with open(temp_file, 'w') as f:
                json.dump(config_dict, f, indent=2)

            temp_file.replace(self.config_file)

        except Exception as e:
            if temp_file.exists():
                temp_file.unlink()
            raise ConfigurationError(f"Failed to save configuration: {e}")

    def config_exists(self) -> bool:
        """Check if configuration file exists."""
        return self.config_file.exists()

    def get_config_path(self) -> Path:
        """Get the configuration file path."""
        return self.config_file
