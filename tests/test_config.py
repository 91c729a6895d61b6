"""Tests for configuration management"""

from healthwatch.config import (
    APIConfig,
    LoggingConfig,
    OracleConfig,
    SecurityConfig,
    Settings,
    TriageConfig,
)


def test_settings_default_values():
    """Test that settings load with default values"""
    settings = Settings()

    assert settings.environment == "development"
    assert settings.debug is False
    assert settings.api.port == 8000
    assert settings.triage.risk_threshold_high == 75.0


def test_api_config():
    """Test API configuration"""
    api_config = APIConfig()

    assert api_config.host == "0.0.0.0"
    assert api_config.port == 8000
    assert api_config.request_timeout == 30.0


def test_oracle_config():
    """Test oracle configuration"""
    oracle_config = OracleConfig()

    assert oracle_config.model
    assert oracle_config.timeout_seconds > 0
    assert oracle_config.max_retries >= 0


def test_triage_config():
    """Test tier thresholds and water quality limits"""
    triage_config = TriageConfig()

    assert triage_config.risk_threshold_high == 75.0
    assert triage_config.risk_threshold_medium == 50.0
    assert triage_config.default_language == "en"
    assert triage_config.ph_safe_min == 6.5
    assert triage_config.ph_safe_max == 8.5
    assert triage_config.turbidity_limit_ntu == 5.0
    assert triage_config.seed_demo_alerts is False


def test_logging_config():
    """Test logging configuration"""
    logging_config = LoggingConfig()

    assert logging_config.level == "INFO"
    assert logging_config.format == "json"


def test_security_config():
    """Test security configuration"""
    security_config = SecurityConfig()

    assert security_config.jwt_algorithm == "HS256"
    assert security_config.require_auth is False


def test_env_prefix_overrides(monkeypatch):
    """Test environment variables override defaults per prefix"""
    monkeypatch.setenv("TRIAGE_RISK_THRESHOLD_HIGH", "80")
    monkeypatch.setenv("ORACLE_MODEL", "openai/gpt-4o-mini")
    monkeypatch.setenv("SECURITY_REQUIRE_AUTH", "true")

    assert TriageConfig().risk_threshold_high == 80.0
    assert OracleConfig().model == "openai/gpt-4o-mini"
    assert SecurityConfig().require_auth is True
