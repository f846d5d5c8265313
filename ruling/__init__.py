"""Project analysis orchestrator for ruling runs."""

__version__ = "0.1.0"
