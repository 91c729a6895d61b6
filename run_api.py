#!/usr/bin/env python3
"""
Startup script for the HealthWatch API server.

Runs the FastAPI application with the configured host and port.
"""

from healthwatch.main import run_api_server

if __name__ == "__main__":
    run_api_server()
