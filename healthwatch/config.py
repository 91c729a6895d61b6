"""Configuration management using Pydantic settings"""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class APIConfig(BaseSettings):
    """API configuration"""

    host: str = Field(default="0.0.0.0", description="API host")
    port: int = Field(default=8000, description="API port")
    request_timeout: float = Field(default=30.0, description="Request timeout in seconds")

    model_config = SettingsConfigDict(
        env_prefix="API_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


class OracleConfig(BaseSettings):
    """Generative oracle configuration"""

    model: str = Field(default="gemini/gemini-2.0-flash", description="LiteLLM model name")
    api_key: Optional[str] = Field(default=None, description="Provider API key (falls back to provider env vars)")
    timeout_seconds: float = Field(default=20.0, description="Per-call timeout in seconds")
    temperature: float = Field(default=0.2, description="Sampling temperature")
    max_retries: int = Field(default=1, description="Retries on transient provider errors")

    model_config = SettingsConfigDict(
        env_prefix="ORACLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


class TriageConfig(BaseSettings):
    """Alert triage and risk tiering configuration"""

    risk_threshold_high: float = Field(default=75.0, description="Scores strictly above this are High tier")
    risk_threshold_medium: float = Field(default=50.0, description="Scores strictly above this are Medium tier")
    default_language: str = Field(default="en", description="Default display language tag")
    ph_safe_min: float = Field(default=6.5, description="Lowest safe drinking water pH")
    ph_safe_max: float = Field(default=8.5, description="Highest safe drinking water pH")
    turbidity_limit_ntu: float = Field(default=5.0, description="Turbidity above this is unsafe (NTU)")
    seed_demo_alerts: bool = Field(default=False, description="Load demo alerts on startup")

    model_config = SettingsConfigDict(
        env_prefix="TRIAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


class LoggingConfig(BaseSettings):
    """Logging configuration"""

    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(default="json", description="Log format (json or text)")
    output: str = Field(default="stdout", description="Log output (stdout or file path)")

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


class SecurityConfig(BaseSettings):
    """Security configuration"""

    jwt_secret: str = Field(default="change-me-in-production", description="JWT secret key")
    jwt_algorithm: str = Field(default="HS256", description="JWT algorithm")
    jwt_expiry_minutes: int = Field(default=720, description="JWT expiry in minutes")
    require_auth: bool = Field(default=False, description="Reject requests without a valid token")
    token_issuer_secret: Optional[str] = Field(default=None, description="Shared secret required to issue tokens through the API")

    model_config = SettingsConfigDict(
        env_prefix="SECURITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


class Settings(BaseSettings):
    """Main application settings"""

    environment: str = Field(default="development", description="Environment (development, staging, production)")
    debug: bool = Field(default=False, description="Debug mode")

    # Sub-configurations
    api: APIConfig = Field(default_factory=APIConfig)
    oracle: OracleConfig = Field(default_factory=OracleConfig)
    triage: TriageConfig = Field(default_factory=TriageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


# Global settings instance
settings = Settings()
