"""Bus consumers."""

from .log_consumer import IConsumer, LoggingConsumer

__all__ = ["IConsumer", "LoggingConsumer"]
