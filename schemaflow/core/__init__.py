"""Core utilities shared across schemaflow."""

from .log import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
