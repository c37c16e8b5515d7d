"""Wire format, request headers and topic route data for RocketMQ-style brokers."""

__version__ = "0.1.0"