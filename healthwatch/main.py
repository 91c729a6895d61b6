"""Main application entry point"""

import uvicorn

from healthwatch.config import settings
from healthwatch.logging_config import get_logger, setup_logging


def initialize_app() -> None:
    """Initialize logging and record the configuration in use"""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        environment=settings.environment,
        debug=settings.debug,
    )

    # Never log the api key or jwt secret
    logger.info(
        "configuration_loaded",
        api_host=settings.api.host,
        api_port=settings.api.port,
        oracle_model=settings.oracle.model,
        oracle_timeout_seconds=settings.oracle.timeout_seconds,
        risk_threshold_high=settings.triage.risk_threshold_high,
        risk_threshold_medium=settings.triage.risk_threshold_medium,
        seed_demo_alerts=settings.triage.seed_demo_alerts,
        require_auth=settings.security.require_auth,
        log_level=settings.logging.level,
        log_format=settings.logging.format,
    )


def run_api_server(host: str = None, port: int = None, reload: bool = None):
    """Run the FastAPI server"""
    initialize_app()

    host = host or settings.api.host
    port = port or settings.api.port
    logger = get_logger(__name__)
    logger.info("starting_api_server", host=host, port=port)

    uvicorn.run(
        "healthwatch.api.app:app",
        host=host,
        port=port,
        reload=settings.debug if reload is None else reload,
        log_level=settings.logging.level.lower()
    )


if __name__ == "__main__":
    run_api_server()
