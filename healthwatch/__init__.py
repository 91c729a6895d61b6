"""HealthWatch community health alert triage engine"""

__version__ = "1.0.0"
