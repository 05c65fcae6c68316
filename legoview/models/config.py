"""Configuration management for the deals/sales viewer."""

import os
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


class ViewerConfig(BaseModel):
    """Main viewer configuration."""
    
    # Acquisition
    api_base_url: str = Field(
        default="https://lego-api-blue.vercel.app",
        description="Base URL of the deals/sales API"
    )
    connect_timeout: float = Field(default=3.0, description="HTTP connect timeout in seconds")
    read_timeout: float = Field(default=8.0, description="HTTP read timeout in seconds")
    
    # Retry configuration
    max_retries: int = Field(default=3, description="Maximum attempts per acquisition")
    retry_base_delay: float = Field(default=0.5, description="Base delay for exponential backoff")
    retry_max_delay: float = Field(default=4.0, description="Maximum retry delay")
    retry_jitter_max: float = Field(default=0.5, description="Maximum jitter for retry delay")
    retryable_status_codes: List[int] = Field(
        default=[429, 502, 503, 504],
        description="HTTP status codes that trigger retries"
    )
    
    # Pagination
    default_page_size: int = Field(default=6, description="Records per page on startup")
    
    # Logging configuration
    log_level: str = Field(default="INFO", description="Logging level")
    structured_logging: bool = Field(default=True, description="Enable structured logging")
    
    # Output configuration
    output_directory: str = Field(default="out", description="Output directory for projection exports")
    output_filename: str = Field(default="projection.json", description="Projection JSON filename")
    
    # Mock server configuration
    mock_server_port: int = Field(default=8001, description="Port for the mock API server")
    
    @field_validator('api_base_url')
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate URL format."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError(f"URL must start with http:// or https://, got: {v}")
        return v.rstrip('/')
    
    @field_validator('default_page_size', 'max_retries')
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"value must be positive, got: {v}")
        return v
    
    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {v}")
        return level
    
    @property
    def output_path(self) -> Path:
        """Get full output file path."""
        return Path(self.output_directory) / self.output_filename
    
    # Environment variable overrides
    @classmethod
    def from_env(cls) -> "ViewerConfig":
        """Create configuration with environment variable overrides."""
        config = cls()
        
        env_mappings = {
            "LEGOVIEW_API_BASE_URL": "api_base_url",
            "LEGOVIEW_PAGE_SIZE": "default_page_size",
            "LEGOVIEW_LOG_LEVEL": "log_level",
            "LEGOVIEW_CONNECT_TIMEOUT": "connect_timeout",
            "LEGOVIEW_READ_TIMEOUT": "read_timeout",
            "LEGOVIEW_MAX_RETRIES": "max_retries",
        }
        
        values = {}
        for env_var, field_name in env_mappings.items():
            if env_var in os.environ:
                value = os.environ[env_var]
                field_info = cls.model_fields[field_name]
                if field_info.annotation == int:
                    values[field_name] = int(value)
                elif field_info.annotation == float:
                    values[field_name] = float(value)
                else:
                    values[field_name] = value
        
        if values:
            config = cls(**{**config.model_dump(), **values})
        return config


class ConfigManager:
    """Manages configuration loading with override precedence."""
    
    def __init__(self, config_file: Optional[Path] = None):
        self.config_file = config_file or Path("config/config.yaml")
        self._config: Optional[ViewerConfig] = None
    
    def load_config(self, cli_overrides: Optional[Dict] = None) -> ViewerConfig:
        """
        Load configuration with override precedence: CLI > ENV > YAML.
        
        Args:
            cli_overrides: Optional dictionary of CLI flag overrides
            
        Returns:
            Fully merged ViewerConfig instance
            
        Raises:
            ValueError: If configuration validation fails
        """
        config_dict = {}
        
        if self.config_file.exists():
            with open(self.config_file, 'r') as f:
                yaml_config = yaml.safe_load(f)
                if yaml_config:
                    config_dict.update(yaml_config)
        
        base_config = ViewerConfig(**config_dict)
        env_config = ViewerConfig.from_env()
        
        merged_dict = base_config.model_dump()
        env_dict = env_config.model_dump()
        
        # Only override with env values that differ from defaults
        default_dict = ViewerConfig().model_dump()
        for key, value in env_dict.items():
            if value != default_dict[key]:
                merged_dict[key] = value
        
        if cli_overrides:
            cli_overrides = {k: v for k, v in cli_overrides.items() if v is not None}
            merged_dict.update(cli_overrides)
        
        self._config = ViewerConfig(**merged_dict)
        return self._config
    
    @property
    def config(self) -> ViewerConfig:
        """Get the loaded configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config
