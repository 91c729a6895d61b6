"""
Integration module for HealthWatch: builds the process-wide triage service.

The service is created once at process start and passed by reference to the
API and CLI; nothing else holds report or alert state.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from healthwatch.config import Settings, settings as default_settings
from healthwatch.logging_config import get_logger
from healthwatch.oracle.llm_client import LLMClient
from healthwatch.oracle.llm_oracle import LLMOracle
from healthwatch.triage_service import TriageService

logger = get_logger(__name__)


class HealthWatchIntegration:
    """Wires the oracle backend into a TriageService."""

    def __init__(
        self,
        config: Optional[Settings] = None,
        oracle: Optional[Any] = None
    ):
        """
        Initialize HealthWatch integration.

        Args:
            config: Application settings (defaults to the global settings)
            oracle: Oracle backend (creates an LLMOracle if None)
        """
        self.config = config or default_settings
        self.oracle = oracle or LLMOracle(LLMClient(self.config.oracle))
        self.triage_service = TriageService(oracle=self.oracle, config=self.config.triage)

        if self.config.triage.seed_demo_alerts:
            result = self.triage_service.seed_demo_alerts()
            logger.info("Demo alerts loaded", alerts=result.total)

        logger.info(
            "HealthWatch integration initialized",
            environment=self.config.environment,
            oracle_model=self.config.oracle.model
        )

    def get_triage_service(self) -> TriageService:
        """Get the triage service instance"""
        return self.triage_service

    def health_check(self) -> Dict[str, Any]:
        """Report component status."""
        service = self.triage_service
        status = "shutting_down" if service.is_shut_down else "healthy"
        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "overall_status": status,
            "components": {
                "report_store": {"status": "healthy", "reports": len(service.report_store)},
                "alert_aggregator": {"status": "healthy", "alerts": len(service.aggregator)},
                "oracle": {"status": "configured", "model": self.config.oracle.model},
            }
        }

    def shutdown(self) -> None:
        """Cancel outstanding oracle requests."""
        logger.info("Shutting down HealthWatch integration")
        self.triage_service.shutdown()


# Global integration instance (singleton pattern)
_integration_instance: Optional[HealthWatchIntegration] = None


def get_integration(
    config: Optional[Settings] = None,
    oracle: Optional[Any] = None,
    force_new: bool = False
) -> HealthWatchIntegration:
    """
    Get or create the global HealthWatch integration instance.

    Args:
        config: Application settings
        oracle: Oracle backend
        force_new: Force creation of new instance

    Returns:
        HealthWatchIntegration instance
    """
    global _integration_instance

    if _integration_instance is None or force_new:
        _integration_instance = HealthWatchIntegration(config=config, oracle=oracle)

    return _integration_instance


def reset_integration():
    """Reset the global integration instance"""
    global _integration_instance

    if _integration_instance:
        _integration_instance.shutdown()
        _integration_instance = None
