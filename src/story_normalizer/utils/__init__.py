# ABOUTME: Cross-cutting utilities and shared infrastructure
# ABOUTME: Supporting services: logging configuration and rich console tables

"""
Utils Layer: Shared infrastructure and cross-cutting concerns

This layer provides:
- Logging configuration (loguru sinks, structlog loggers)
- Rich table rendering for the CLI

Data Flow: Supporting services for all other layers
"""

from . import logging

__all__ = [
    "logging",
]
