"""Client for the semantic property endpoints of a remote wiki."""

from __future__ import annotations

from .client import SemanticApiClient, SemanticApiError

__all__ = ["SemanticApiClient", "SemanticApiError"]
