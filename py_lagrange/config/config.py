from pathlib import Path
from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

import os

# Explicitly load .env for local/dev environments only if values are missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ}
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LAGRANGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Texture sizes (pixels). Ramp textures are N x 1, the others N x N.
    surface_texture_size: int = Field(default=256, ge=1, description="Width of the surface color ramp texture")
    biome_texture_size: int = Field(default=256, ge=1, description="Side of the square biome texture")
    clouds_texture_size: int = Field(default=256, ge=1, description="Width of the clouds opacity ramp texture")
    ring_texture_size: int = Field(default=256, ge=1, description="Width of the ring color ramp texture")
    max_texture_size: int = Field(default=4096, ge=1, description="Max texture side accepted by the API")

    # Color ramps
    max_ramp_steps: int = Field(default=16, ge=2, description="Max ramp steps, matches the shader uniform array length")

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (e.g., plain, json)")


# Instantiate singleton settings object
settings = Settings()
