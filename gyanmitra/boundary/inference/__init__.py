"""
Inference boundary: adapter for the external answer-generation service.

Exports:
  - InferenceClient: httpx-based client with failure classification
  - MockResponder: deterministic offline stand-in
"""

from gyanmitra.boundary.inference.client import InferenceClient
from gyanmitra.boundary.inference.mock_responder import MockResponder

__all__ = ["InferenceClient", "MockResponder"]
