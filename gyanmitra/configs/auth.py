"""
Authentication configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Bearer token verification configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from gyanmitra.configs.base import BaseSettings


class AuthSettings(BaseSettings):
    """JWT verification configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="JWT_",
        case_sensitive=False,
        extra="ignore",
    )

    secret_key: str = Field(
        default="change-me-in-production",
        description="Shared secret used to verify bearer tokens",
    )
    algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        description="Lifetime of tokens minted by the development helper",
    )
