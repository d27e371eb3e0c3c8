"""Configuration management with YAML and environment variable support."""

from pathlib import Path
from typing import ClassVar, Optional

import yaml
from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Custom settings source that loads configuration from YAML file."""

    def get_field_value(self, field, field_name: str):
        # Not used with prepare method
        pass

    def prepare_field_value(self, field_name: str, field, value, value_is_complex: bool):
        return value

    def __call__(self):
        # Load from config.yaml in current directory
        yaml_path = Path("config.yaml")
        if not yaml_path.exists():
            return {}

        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        return data


class GoogleConfig(BaseModel):
    """Google Generative AI configuration.

    api_key is used in Gemini API mode and for authenticated asset downloads.
    project_id and location only matter when use_vertex_ai is set.
    """

    api_key: Optional[SecretStr] = None
    use_vertex_ai: bool = False
    project_id: Optional[str] = None
    location: str = "us-central1"


class GenerationConfig(BaseModel):
    """Generation and polling parameters."""

    poll_interval: float = Field(default=10.0, gt=0)
    # None keeps polling until the remote job leaves the running state
    poll_max_attempts: Optional[int] = Field(default=None, ge=1)
    poll_timeout: Optional[float] = Field(default=None, gt=0)
    fetch_timeout: float = 120.0
    max_story_prompts: int = 20
    max_reference_images: int = 3


class StorageConfig(BaseModel):
    """Local artifact storage configuration."""

    output_dir: Path = Path("tmp/generations")

    @field_validator("output_dir", mode="before")
    @classmethod
    def convert_output_dir_to_path(cls, v):
        """Convert string to Path object."""
        if isinstance(v, str):
            return Path(v)
        return v


class LoggingConfig(BaseModel):
    """Logging configuration applied by the CLI."""

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Settings(BaseSettings):
    """Main application settings with YAML and environment variable support.

    Configuration sources (in priority order):
    1. Environment variables (prefix: VEOGEN_, delimiter: __)
    2. .env file
    3. YAML file (config.yaml)
    4. Field defaults
    """

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_nested_delimiter="__",
        env_prefix="VEOGEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    google: GoogleConfig = Field(default_factory=GoogleConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ):
        """Customize settings sources to include YAML configuration.

        Priority order (highest to lowest):
        1. Environment variables
        2. .env file
        3. YAML file
        4. Init settings (programmatic defaults)
        """
        return (
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            init_settings,
        )


# Singleton instance
settings = Settings()
