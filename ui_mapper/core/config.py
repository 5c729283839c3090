"""Configuration management for the UI Mapper framework."""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

# Load environment variables
load_dotenv()


class Config(BaseSettings):
    """Configuration class for UI Mapper."""

    # OpenAI Configuration
    openai_api_key: str = Field(default="", description="OpenAI API key (required for detection only)")
    openai_model: str = Field(default="gpt-4o")
    openai_max_tokens: int = Field(default=4000)
    openai_temperature: float = Field(default=0.2)
    detection_max_retries: int = Field(default=4)
    detection_base_backoff: float = Field(default=1.0)  # seconds

    # Viewport Configuration
    viewport_margin: int = Field(default=80, description="Pixels reserved around the raster on first fit")
    viewport_min_zoom: float = Field(default=0.1)
    viewport_max_zoom: float = Field(default=5.0)
    viewport_zoom_in_step: float = Field(default=1.2)
    viewport_zoom_out_step: float = Field(default=0.8)

    # Schematic rendering
    render_background: str = Field(default="#f1f5f9")
    render_stroke_width: int = Field(default=3)
    render_font_path: Optional[str] = Field(default=None, description="TrueType font for labels (Pillow default if unset)")

    # Export
    export_jpeg_quality: int = Field(default=90)
    export_pdf_invariant: bool = Field(default=True)  # reproducible PDF bytes

    # Storage
    storage_path: str = Field(default="storage/ui_mapper_projects_v2.json")
    default_project_name: str = Field(default="My First Project")

    # Framework Configuration
    log_level: str = Field(default="INFO")
    log_to_file: bool = Field(default=True)
    logs_dir: str = Field(default="logs")
    debug_mode: bool = Field(default=False)

    # API Configuration
    api_host: str = Field(default="localhost")
    api_port: int = Field(default=8000)
    cors_origins: list[str] = Field(default=["http://localhost:3000"])

    class Config:
        """Pydantic configuration for environment loading."""

        env_file = ".env"
        case_sensitive = False
        extra = "ignore"  # Ignore unexpected env vars rather than raising errors

    def validate_config(self) -> bool:
        """Validate configuration values."""
        if not 0 < self.viewport_min_zoom <= 1.0 <= self.viewport_max_zoom:
            raise ValueError("Zoom limits must satisfy 0 < min <= 1.0 <= max")

        if self.viewport_margin < 0:
            raise ValueError("Viewport margin must not be negative")

        if not 1 <= self.export_jpeg_quality <= 100:
            raise ValueError("JPEG quality must be between 1 and 100")

        if self.render_stroke_width <= 0:
            raise ValueError("Stroke width must be positive")

        return True

    def validate_detection_config(self) -> bool:
        """Validate configuration required for remote detection."""
        if not self.openai_api_key:
            raise ValueError("OPENAI_API_KEY not configured")
        return self.validate_config()

    def get_console_log_level(self) -> str:
        """Console log level; debug mode forces DEBUG."""
        return "DEBUG" if self.debug_mode else self.log_level.upper()

    def get_storage_path(self) -> str:
        """Get the full path to the project storage file."""
        return os.path.join(os.getcwd(), self.storage_path)


# Global configuration instance
config = Config()
