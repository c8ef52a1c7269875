"""
Inference service configuration settings.

Settings for the external answer-generation service: base URL, the long
generation timeout, and the deterministic mock responder toggle.

Dependencies: pydantic, pydantic_settings
System role: Upstream answer service configuration
"""

from pydantic import AliasChoices, Field
from pydantic_settings import SettingsConfigDict

from gyanmitra.configs.base import BaseSettings


class InferenceSettings(BaseSettings):
    """Answer-generation service configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="AI_SERVICE_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    url: str = Field(
        default="http://localhost:8000",
        description="Base URL of the answer-generation service",
    )
    timeout_seconds: float = Field(
        default=600.0,
        description="Timeout for a generation request; model inference takes minutes",
    )
    health_timeout_seconds: float = Field(
        default=3.0,
        description="Timeout for health and model-info probes",
    )
    use_mock: bool = Field(
        default=False,
        validation_alias=AliasChoices("ai_service_use_mock", "use_mock_ai"),
        description="Answer queries with the deterministic mock responder",
    )
    mock_latency_seconds: float = Field(
        default=1.5,
        description="Artificial delay applied by the mock responder",
    )
    default_model_id: str = Field(
        default="Mistral-7B-Instruct-v0.2",
        description="Model id recorded when the service does not report one",
    )
