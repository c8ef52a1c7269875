"""GyanMitra conversation and query orchestration service."""

__version__ = "0.1.0"
