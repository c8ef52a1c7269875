"""Boundary adapters: persistence and the answer-generation service."""
